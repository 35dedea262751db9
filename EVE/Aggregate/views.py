"""
Aggregate Views

Purpose: Chart-ready grouping results.

Responsibilities:
- AggregateView: unique labels with index-aligned counts
- AggregateReport: every view produced from one snapshot
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

__all__ = ["AggregateView", "AggregateReport", "RENDERED_VIEWS"]

# Views consumed by charts, in dashboard order. Revision is computed but not rendered.
RENDERED_VIEWS = ("time", "signature", "category", "severity")


@dataclass(frozen=True)
class AggregateView:
	"""Labels in first-occurrence order and their counts."""

	labels: Tuple[str, ...] = ()
	counts: Tuple[int, ...] = ()

	def __post_init__(self) -> None:
		if len(self.labels) != len(self.counts):
			raise ValueError("labels and counts must have the same length")

	@classmethod
	def from_mapping(cls, tally: Mapping[str, int]) -> "AggregateView":
		"""Build a view from an insertion-ordered label -> count mapping."""
		return cls(labels=tuple(tally.keys()), counts=tuple(tally.values()))

	@property
	def total(self) -> int:
		return sum(self.counts)

	def __len__(self) -> int:
		return len(self.labels)

	def to_dict(self) -> Dict[str, list]:
		return {"labels": list(self.labels), "counts": list(self.counts)}


@dataclass(frozen=True)
class AggregateReport:
	"""All views computed from a single EventSnapshot."""

	time: AggregateView = field(default_factory=AggregateView)
	signature: AggregateView = field(default_factory=AggregateView)
	category: AggregateView = field(default_factory=AggregateView)
	severity: AggregateView = field(default_factory=AggregateView)
	revision: AggregateView = field(default_factory=AggregateView)
	snapshot_id: str = ""
	event_count: int = 0
	rejected_count: int = 0

	def rendered_views(self) -> Dict[str, AggregateView]:
		"""The four views a dashboard draws; revision is left out."""
		return {name: getattr(self, name) for name in RENDERED_VIEWS}

	def to_dict(self) -> Dict[str, Any]:
		return {
			"snapshot_id": self.snapshot_id,
			"event_count": self.event_count,
			"rejected_count": self.rejected_count,
			"time": self.time.to_dict(),
			"signature": self.signature.to_dict(),
			"category": self.category.to_dict(),
			"severity": self.severity.to_dict(),
			"revision": self.revision.to_dict(),
		}
