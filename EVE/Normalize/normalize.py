'''
Event Normalization

Purpose: Validate raw EVE records once, before aggregation.

Responsibilities:
- Convert each raw record into an immutable AlertEvent
- Parse ISO-8601 timestamps (Z suffix and Suricata +0000 offsets)
- Record why a field could not be used instead of failing mid-grouping
- Capture the batch as an EventSnapshot with a unique snapshot ID

Why important:
- Aggregation code never touches raw nested dicts
- One bad record never aborts a whole refresh
'''

from typing import Any, Dict, List, Optional, Sequence
import re
import uuid
from datetime import datetime, timezone

from EVE.Normalize.models import AlertEvent, EventSnapshot, RejectedRecord

__all__ = ["normalize_event", "build_snapshot", "parse_timestamp"]


# Suricata writes offsets as +0000; normalize to +00:00 for fromisoformat
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def _generate_snapshot_id() -> str:
	"""
	Generate a unique snapshot ID.

	Format: SNAP-<ISO_TIMESTAMP>-<UUID_SHORT>
	Example: SNAP-20250809T140310Z-a7f2b1c3
	"""
	iso_timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
	uuid_short = uuid.uuid4().hex[:8]
	return f"SNAP-{iso_timestamp}-{uuid_short}"


def parse_timestamp(value: Any) -> Optional[datetime]:
	"""
	Parse an EVE timestamp into an aware datetime.

	Naive values are taken as UTC. Returns None when the value is not a
	string or does not parse.
	"""
	if not isinstance(value, str) or not value.strip():
		return None

	text = value.strip()
	if text.endswith("Z") or text.endswith("z"):
		text = text[:-1] + "+00:00"
	else:
		text = _COMPACT_OFFSET.sub(r"\1:\2", text)

	try:
		parsed = datetime.fromisoformat(text)
	except ValueError:
		return None

	if parsed.tzinfo is None:
		parsed = parsed.replace(tzinfo=timezone.utc)
	return parsed


def _string_field(alert: Dict[str, Any], name: str, issues: List[str]) -> Optional[str]:
	value = alert.get(name)
	if value is None:
		issues.append(f"alert.{name} missing")
		return None
	if not isinstance(value, str):
		issues.append(f"alert.{name} must be a string")
		return None
	return value


def _int_field(alert: Dict[str, Any], name: str, issues: List[str]) -> Optional[int]:
	value = alert.get(name)
	if value is None:
		issues.append(f"alert.{name} missing")
		return None
	# bool is an int subclass but never a valid severity or revision
	if isinstance(value, bool) or not isinstance(value, int):
		issues.append(f"alert.{name} must be an integer")
		return None
	return value


def normalize_event(raw: Dict[str, Any]) -> AlertEvent:
	"""
	Normalize one raw EVE record into an AlertEvent.

	Missing or ill-typed fields become None and are listed in
	AlertEvent.issues; the record itself is still usable for every other
	grouping.

	Raises:
		ValueError: If raw is not a dictionary
	"""
	if not isinstance(raw, dict):
		raise ValueError("event record must be a dictionary")

	issues: List[str] = []

	timestamp = raw.get("timestamp")
	occurred_at = None
	if timestamp is None:
		issues.append("timestamp missing")
	elif not isinstance(timestamp, str):
		issues.append("timestamp must be a string")
		timestamp = None
	else:
		occurred_at = parse_timestamp(timestamp)
		if occurred_at is None:
			issues.append(f"timestamp not ISO-8601: {timestamp!r}")

	alert = raw.get("alert")
	if not isinstance(alert, dict):
		issues.append("alert object missing" if alert is None else "alert must be an object")
		signature = category = severity = rev = None
	else:
		signature = _string_field(alert, "signature", issues)
		category = _string_field(alert, "category", issues)
		severity = _int_field(alert, "severity", issues)
		rev = _int_field(alert, "rev", issues)

	return AlertEvent(
		timestamp=timestamp,
		occurred_at=occurred_at,
		signature=signature,
		category=category,
		severity=severity,
		rev=rev,
		issues=tuple(issues),
	)


def build_snapshot(records: Sequence[Any], source: str = "") -> EventSnapshot:
	"""
	Capture a batch of raw records as an immutable EventSnapshot.

	Records that are not JSON objects are rejected with a reason and
	contribute to no aggregate. Order of accepted events follows the feed.

	Args:
		records: Raw records as returned by the loader
		source: Where the records came from (path or "sample")

	Returns:
		EventSnapshot

	Raises:
		ValueError: If records is not a list or tuple
	"""
	if not isinstance(records, (list, tuple)):
		raise ValueError("records must be a list of event objects")

	events: List[AlertEvent] = []
	rejected: List[RejectedRecord] = []

	for index, record in enumerate(records):
		if not isinstance(record, dict):
			rejected.append(RejectedRecord(index=index, reason=f"record is {type(record).__name__}, not an object"))
			continue
		events.append(normalize_event(record))

	return EventSnapshot(
		events=tuple(events),
		rejected=tuple(rejected),
		snapshot_id=_generate_snapshot_id(),
		captured_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
		source=source,
	)
