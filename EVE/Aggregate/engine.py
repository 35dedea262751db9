"""
Aggregation Engine.

Groups an EventSnapshot into chart-ready count views. Every grouping keeps
labels in first-occurrence order: time buckets follow feed arrival order,
not clock order, so an unsorted feed yields unsorted buckets.
"""

from typing import Callable, Dict, Tuple

from EVE.Aggregate.rules import AggregationConfigLoader, GroupingRules, default_config_path
from EVE.Aggregate.views import AggregateReport, AggregateView
from EVE.Normalize.models import AlertEvent, EventSnapshot

__all__ = [
	"AggregationEngine",
	"aggregate",
	"aggregate_by_time",
	"aggregate_by_signature",
	"aggregate_by_category",
	"aggregate_by_severity",
	"aggregate_by_revision",
]

KeyFunc = Callable[[AlertEvent], str]


class AggregationEngine:
	"""Pure snapshot -> view grouping. Holds configuration only, no pass state."""

	def __init__(self, config_loader: AggregationConfigLoader) -> None:
		self._rules = GroupingRules(config_loader)

	def _groupings(self) -> Dict[str, KeyFunc]:
		return {
			"time": self._rules.time_label,
			"signature": self._rules.signature_label,
			"category": self._rules.category_label,
			"severity": self._rules.severity_label,
			"revision": self._rules.revision_label,
		}

	@staticmethod
	def _events(snapshot: EventSnapshot) -> Tuple[AlertEvent, ...]:
		if not isinstance(snapshot, EventSnapshot):
			raise ValueError("snapshot must be an EventSnapshot")
		return snapshot.events

	def _group(self, snapshot: EventSnapshot, key: KeyFunc) -> AggregateView:
		tally: Dict[str, int] = {}
		for event in self._events(snapshot):
			label = key(event)
			tally[label] = tally.get(label, 0) + 1
		return AggregateView.from_mapping(tally)

	def aggregate_by_time(self, snapshot: EventSnapshot) -> AggregateView:
		return self._group(snapshot, self._rules.time_label)

	def aggregate_by_signature(self, snapshot: EventSnapshot) -> AggregateView:
		return self._group(snapshot, self._rules.signature_label)

	def aggregate_by_category(self, snapshot: EventSnapshot) -> AggregateView:
		return self._group(snapshot, self._rules.category_label)

	def aggregate_by_severity(self, snapshot: EventSnapshot) -> AggregateView:
		return self._group(snapshot, self._rules.severity_label)

	def aggregate_by_revision(self, snapshot: EventSnapshot) -> AggregateView:
		"""Group by rule revision. No chart consumes this view."""
		return self._group(snapshot, self._rules.revision_label)

	def aggregate(self, snapshot: EventSnapshot) -> AggregateReport:
		"""
		Compute every view in one pass over the snapshot.

		Produces the same views as calling each aggregate_by_* method.
		"""
		groupings = self._groupings()
		tallies: Dict[str, Dict[str, int]] = {name: {} for name in groupings}

		for event in self._events(snapshot):
			for name, key in groupings.items():
				tally = tallies[name]
				label = key(event)
				tally[label] = tally.get(label, 0) + 1

		return AggregateReport(
			time=AggregateView.from_mapping(tallies["time"]),
			signature=AggregateView.from_mapping(tallies["signature"]),
			category=AggregateView.from_mapping(tallies["category"]),
			severity=AggregateView.from_mapping(tallies["severity"]),
			revision=AggregateView.from_mapping(tallies["revision"]),
			snapshot_id=snapshot.snapshot_id,
			event_count=len(snapshot),
			rejected_count=len(snapshot.rejected),
		)


_ENGINE: AggregationEngine | None = None


def _get_engine() -> AggregationEngine:
	global _ENGINE
	if _ENGINE is None:
		_ENGINE = AggregationEngine(AggregationConfigLoader(default_config_path()))
	return _ENGINE


def aggregate(snapshot: EventSnapshot) -> AggregateReport:
	"""Compute all views with the packaged configuration."""
	return _get_engine().aggregate(snapshot)


def aggregate_by_time(snapshot: EventSnapshot) -> AggregateView:
	return _get_engine().aggregate_by_time(snapshot)


def aggregate_by_signature(snapshot: EventSnapshot) -> AggregateView:
	return _get_engine().aggregate_by_signature(snapshot)


def aggregate_by_category(snapshot: EventSnapshot) -> AggregateView:
	return _get_engine().aggregate_by_category(snapshot)


def aggregate_by_severity(snapshot: EventSnapshot) -> AggregateView:
	return _get_engine().aggregate_by_severity(snapshot)


def aggregate_by_revision(snapshot: EventSnapshot) -> AggregateView:
	return _get_engine().aggregate_by_revision(snapshot)
