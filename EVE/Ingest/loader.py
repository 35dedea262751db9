'''
Event Ingestion

Purpose: Load EVE alert records from disk.

Responsibilities:
- Read a JSON array, a single JSON object, or EVE JSON lines
- Provide a sample feed for demo/testing

Why isolated:
- The feed usually arrives over HTTP or from a sensor's eve.json; only
  this module knows where records come from
'''

import copy
import json
import os
from typing import Any, Dict, List, Optional

__all__ = ["load_events", "SAMPLE_EVENTS"]


SAMPLE_EVENTS: List[Dict[str, Any]] = [
	{
		"timestamp": "2024-01-01T10:00:00.114251+0000",
		"event_type": "alert",
		"src_ip": "198.51.100.23",
		"dest_ip": "10.0.0.12",
		"proto": "TCP",
		"alert": {
			"signature": "ET SCAN Suspicious inbound to MSSQL port 1433",
			"category": "Attempted Information Leak",
			"severity": 2,
			"rev": 3
		}
	},
	{
		"timestamp": "2024-01-01T10:00:00.873002+0000",
		"event_type": "alert",
		"src_ip": "198.51.100.23",
		"dest_ip": "10.0.0.13",
		"proto": "TCP",
		"alert": {
			"signature": "ET SCAN Suspicious inbound to MSSQL port 1433",
			"category": "Attempted Information Leak",
			"severity": 2,
			"rev": 3
		}
	},
	{
		"timestamp": "2024-01-01T10:05:12.004410+0000",
		"event_type": "alert",
		"src_ip": "10.0.0.12",
		"dest_ip": "203.0.113.77",
		"proto": "TCP",
		"alert": {
			"signature": "ET MALWARE Win32/Emotet CnC Activity",
			"category": "A Network Trojan was detected",
			"severity": 1,
			"rev": 7
		}
	},
	{
		"timestamp": "2024-01-01T10:03:40.550120+0000",
		"event_type": "alert",
		"src_ip": "10.0.0.40",
		"dest_ip": "8.8.8.8",
		"proto": "UDP",
		"alert": {
			"signature": "ET POLICY DNS Query to .onion proxy Domain",
			"category": "Potential Corporate Privacy Violation",
			"severity": 3,
			"rev": 2
		}
	},
	{
		"timestamp": "2024-01-01T10:05:12.961003+0000",
		"event_type": "alert",
		"src_ip": "10.0.0.12",
		"dest_ip": "203.0.113.77",
		"proto": "TCP",
		"alert": {
			"signature": "ET MALWARE Win32/Emotet CnC Activity",
			"category": "A Network Trojan was detected",
			"severity": 1,
			"rev": 7
		}
	}
]


def _parse_json_lines(text: str) -> List[Any]:
	"""Parse EVE JSON lines: one object per line, blank lines ignored."""
	records: List[Any] = []
	for line in text.splitlines():
		line = line.strip()
		if not line:
			continue
		records.append(json.loads(line))
	return records


def load_events(path: Optional[str] = None, use_sample: bool = False) -> List[Any]:
	"""
	Load raw event records.

	Args:
		path: Path to an eve.json file (array or JSON lines)
		use_sample: Return a copy of SAMPLE_EVENTS instead of reading path

	Returns:
		List of raw records, in feed order

	Raises:
		FileNotFoundError: If path is empty, missing, or a directory
		json.JSONDecodeError: If the file is not valid JSON or JSON lines
		ValueError: If the top-level JSON value is not an array or object
	"""
	if use_sample:
		return copy.deepcopy(SAMPLE_EVENTS)

	if not path or not os.path.isfile(path):
		raise FileNotFoundError(f"Event file not found: {path}")

	with open(path, "r", encoding="utf-8") as f:
		text = f.read()

	try:
		data = json.loads(text)
	except json.JSONDecodeError:
		# A multi-line file that is not one document is treated as JSON lines
		if len([line for line in text.splitlines() if line.strip()]) < 2:
			raise
		return _parse_json_lines(text)

	if isinstance(data, list):
		return data
	if isinstance(data, dict):
		return [data]
	raise ValueError(f"event feed must be a JSON array or objects, got {type(data).__name__}")
