"""
Unit Tests for EVE/Normalize/normalize.py

Tests record validation, timestamp parsing and snapshot capture.
"""

import pytest
import os
import re
import sys
import dataclasses
from datetime import datetime, timezone, timedelta

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from EVE.Normalize.normalize import normalize_event, build_snapshot, parse_timestamp
from EVE.Normalize.models import AlertEvent, EventSnapshot


class TestParseTimestamp:
    """Test suite for parse_timestamp()."""

    def test_zulu_suffix(self):
        """Test that a trailing Z parses as UTC."""
        result = parse_timestamp("2024-01-01T10:00:00Z")
        assert result == datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    def test_suricata_compact_offset(self):
        """Test the +0000 offset form Suricata writes."""
        result = parse_timestamp("2024-01-01T10:00:00.114251+0000")
        assert result == datetime(2024, 1, 1, 10, 0, 0, 114251, tzinfo=timezone.utc)

    def test_non_utc_offset(self):
        """Test that a non-zero offset is kept."""
        result = parse_timestamp("2024-01-01T12:00:00+0200")
        assert result.utcoffset() == timedelta(hours=2)
        assert result == datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    def test_space_separator_with_compact_offset(self):
        """Test a space-separated timestamp with a +0000 offset."""
        result = parse_timestamp("2024-01-01 10:00:00.114251+0000")
        assert result == datetime(2024, 1, 1, 10, 0, 0, 114251, tzinfo=timezone.utc)

    def test_millisecond_fraction(self):
        result = parse_timestamp("2024-01-01T10:00:00.123-0100")
        assert result == datetime(2024, 1, 1, 11, 0, 0, 123000, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        """Test that a timestamp without offset is taken as UTC."""
        result = parse_timestamp("2024-01-01T10:00:00")
        assert result.tzinfo == timezone.utc

    @pytest.mark.parametrize("value", ["yesterday", "", "   ", None, 1704103200, "2024-13-45T99:00:00Z"])
    def test_unparseable_returns_none(self, value):
        """Test that unusable values return None instead of raising."""
        assert parse_timestamp(value) is None


class TestNormalizeEvent:
    """Test suite for normalize_event()."""

    def test_complete_record(self, record_factory):
        """Test that a complete record normalizes without issues."""
        event = normalize_event(record_factory("ET SCAN", "Scan", 2, 1))

        assert event.signature == "ET SCAN"
        assert event.category == "Scan"
        assert event.severity == 2
        assert event.rev == 1
        assert event.timestamp == "2024-01-01T10:00:00Z"
        assert event.occurred_at is not None
        assert event.issues == ()
        assert event.is_complete

    def test_missing_alert_object(self):
        """Test that a record without alert keeps its timestamp."""
        event = normalize_event({"timestamp": "2024-01-01T10:00:00Z"})

        assert event.occurred_at is not None
        assert event.signature is None
        assert event.severity is None
        assert "alert object missing" in event.issues

    def test_alert_not_an_object(self):
        """Test that a non-dict alert is reported."""
        event = normalize_event({"timestamp": "2024-01-01T10:00:00Z", "alert": "ET SCAN"})
        assert "alert must be an object" in event.issues
        assert event.category is None

    def test_wrong_field_types(self):
        """Test that ill-typed alert fields become None with a reason."""
        event = normalize_event({
            "timestamp": "2024-01-01T10:00:00Z",
            "alert": {"signature": 42, "category": "Scan", "severity": "2", "rev": 1.5}
        })

        assert event.signature is None
        assert event.category == "Scan"
        assert event.severity is None
        assert event.rev is None
        assert "alert.signature must be a string" in event.issues
        assert "alert.severity must be an integer" in event.issues

    def test_bool_is_not_an_integer(self):
        """Test that booleans are rejected for integer fields."""
        event = normalize_event({"alert": {"signature": "x", "category": "y", "severity": True, "rev": False}})
        assert event.severity is None
        assert event.rev is None

    def test_invalid_timestamp_kept_raw(self):
        """Test that an unparseable timestamp keeps its raw value."""
        event = normalize_event({"timestamp": "yesterday", "alert": {}})
        assert event.timestamp == "yesterday"
        assert event.occurred_at is None
        assert any("ISO-8601" in issue for issue in event.issues)

    def test_missing_timestamp(self):
        """Test that a missing timestamp is reported."""
        event = normalize_event({"alert": {"signature": "x", "category": "y", "severity": 1, "rev": 1}})
        assert event.timestamp is None
        assert event.issues == ("timestamp missing",)

    def test_non_dict_raises_error(self):
        """Test that a non-dict record raises ValueError."""
        with pytest.raises(ValueError, match="must be a dictionary"):
            normalize_event(["not", "a", "dict"])

    def test_event_is_immutable(self, record_factory):
        """Test that AlertEvent cannot be modified after creation."""
        event = normalize_event(record_factory())
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.signature = "changed"


class TestBuildSnapshot:
    """Test suite for build_snapshot()."""

    def test_preserves_order(self, unsorted_records):
        """Test that events stay in feed order."""
        snapshot = build_snapshot(unsorted_records)
        assert [e.timestamp for e in snapshot] == [r["timestamp"] for r in unsorted_records]

    def test_len_counts_accepted_events(self, malformed_snapshot):
        """Test that non-object records are rejected, not counted."""
        assert len(malformed_snapshot) == 4
        assert len(malformed_snapshot.rejected) == 1
        assert malformed_snapshot.rejected[0].index == 4
        assert "str" in malformed_snapshot.rejected[0].reason

    def test_empty_feed(self, empty_snapshot):
        """Test that an empty feed is a valid, empty snapshot."""
        assert len(empty_snapshot) == 0
        assert empty_snapshot.rejected == ()

    def test_snapshot_id_format(self, example_snapshot):
        """Test the SNAP-<timestamp>-<hex> ID format."""
        assert re.match(r"^SNAP-\d{8}T\d{6}Z-[a-f0-9]{8}$", example_snapshot.snapshot_id)

    def test_snapshot_ids_are_unique(self, example_records):
        """Test that two captures of the same feed get different IDs."""
        assert build_snapshot(example_records).snapshot_id != build_snapshot(example_records).snapshot_id

    def test_source_recorded(self, example_snapshot):
        assert example_snapshot.source == "test"

    def test_records_not_mutated(self, example_records):
        """Test that building a snapshot leaves the raw records untouched."""
        before = [dict(r, alert=dict(r["alert"])) for r in example_records]
        build_snapshot(example_records)
        assert example_records == before

    def test_snapshot_is_immutable(self, example_snapshot):
        assert isinstance(example_snapshot, EventSnapshot)
        assert isinstance(example_snapshot.events, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            example_snapshot.events = ()

    def test_non_list_raises_error(self):
        """Test that a non-list feed raises ValueError."""
        with pytest.raises(ValueError, match="records must be a list"):
            build_snapshot({"timestamp": "2024-01-01T10:00:00Z"})
