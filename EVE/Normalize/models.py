"""
Alert Data Model

Purpose: Typed, immutable containers for one aggregation pass.

Responsibilities:
- AlertEvent: one normalized detection event
- RejectedRecord: a feed entry that could not become an event
- EventSnapshot: the ordered batch handed to the aggregation engine

Design notes:
- Frozen dataclasses; a snapshot is never mutated after creation
- Fields that failed normalization are None, with the reason kept in issues
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional, Tuple

__all__ = ["AlertEvent", "RejectedRecord", "EventSnapshot"]


@dataclass(frozen=True)
class AlertEvent:
	"""A single alert record with the fields used for grouping."""

	timestamp: Optional[str] = None
	occurred_at: Optional[datetime] = None
	signature: Optional[str] = None
	category: Optional[str] = None
	severity: Optional[int] = None
	rev: Optional[int] = None
	issues: Tuple[str, ...] = ()

	@property
	def is_complete(self) -> bool:
		return not self.issues


@dataclass(frozen=True)
class RejectedRecord:
	"""Feed entry excluded from every aggregate."""

	index: int
	reason: str


@dataclass(frozen=True)
class EventSnapshot:
	"""Ordered batch of alert events, in feed arrival order."""

	events: Tuple[AlertEvent, ...] = ()
	rejected: Tuple[RejectedRecord, ...] = ()
	snapshot_id: str = ""
	captured_at: str = ""
	source: str = ""

	def __len__(self) -> int:
		return len(self.events)

	def __iter__(self) -> Iterator[AlertEvent]:
		return iter(self.events)
