"""
Pytest Configuration and Shared Fixtures

Provides reusable test fixtures for all test modules:
- Raw EVE records, clean and malformed
- Snapshots built from those records
- Temporary config files for custom aggregation settings
"""

import pytest
import os
import sys
import json
from typing import Dict, Any, List

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from EVE.Normalize.normalize import build_snapshot


def make_event(signature="ET SCAN", category="Scan", severity=2, rev=1,
               timestamp="2024-01-01T10:00:00Z") -> Dict[str, Any]:
    """Build one raw EVE alert record."""
    return {
        "timestamp": timestamp,
        "event_type": "alert",
        "alert": {
            "signature": signature,
            "category": category,
            "severity": severity,
            "rev": rev
        }
    }


# ============================================================================
# Raw Record Fixtures
# ============================================================================

@pytest.fixture
def record_factory():
    """Factory fixture returning make_event."""
    return make_event


@pytest.fixture
def example_records() -> List[Dict[str, Any]]:
    """Three-event feed: two identical scans and one malware alert."""
    return [
        make_event("ET SCAN", "Scan", 2, 1, "2024-01-01T10:00:00Z"),
        make_event("ET SCAN", "Scan", 2, 1, "2024-01-01T10:00:00Z"),
        make_event("ET MALWARE-Long-Name-Example", "Malware", 1, 2, "2024-01-01T10:05:00Z"),
    ]


@pytest.fixture
def unsorted_records() -> List[Dict[str, Any]]:
    """Feed whose arrival order differs from clock order."""
    return [
        make_event(timestamp="2024-01-01T10:05:00Z"),
        make_event(timestamp="2024-01-01T10:00:00Z"),
        make_event(timestamp="2024-01-01T10:05:00Z"),
    ]


@pytest.fixture
def malformed_records() -> List[Any]:
    """Feed with missing nested fields, bad types and a non-object entry."""
    return [
        make_event("ET SCAN", "Scan", 2, 1),
        {"timestamp": "2024-01-01T10:00:01Z"},
        {"timestamp": "yesterday", "alert": {"signature": "ET POLICY", "category": "Policy", "severity": "high", "rev": 1}},
        {"alert": {"signature": 42, "category": None, "severity": 3, "rev": True}},
        "not an object",
    ]


# ============================================================================
# Snapshot Fixtures
# ============================================================================

@pytest.fixture
def example_snapshot(example_records):
    return build_snapshot(example_records, source="test")


@pytest.fixture
def empty_snapshot():
    return build_snapshot([], source="test")


@pytest.fixture
def malformed_snapshot(malformed_records):
    return build_snapshot(malformed_records, source="test")


# ============================================================================
# Config and File Fixtures
# ============================================================================

@pytest.fixture
def write_aggregation_config(tmp_path):
    """Factory fixture to write a custom aggregation config.yml."""
    def _write(text: str) -> str:
        config_file = tmp_path / "config.yml"
        config_file.write_text(text)
        return str(config_file)
    return _write


@pytest.fixture
def create_temp_event_file(tmp_path):
    """Factory fixture to create temporary EVE JSON files."""
    def _create_file(data: Any, filename: str = "eve.json", json_lines: bool = False) -> str:
        file_path = tmp_path / filename
        if json_lines:
            file_path.write_text("\n".join(json.dumps(record) for record in data) + "\n")
        else:
            file_path.write_text(json.dumps(data, indent=2))
        return str(file_path)
    return _create_file
