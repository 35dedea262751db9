"""
Label formatting for chart axes and legends.

Keeps long signature names from blowing out chart layouts.
"""

from typing import Tuple

from EVE.Aggregate.views import AggregateView

__all__ = ["truncate", "LabelFormatter", "DEFAULT_MAX_LENGTH", "ELLIPSIS"]

DEFAULT_MAX_LENGTH = 14
ELLIPSIS = "..."


def truncate(label: str, max_length: int = DEFAULT_MAX_LENGTH, marker: str = ELLIPSIS) -> str:
	"""
	Cut label to max_length characters and append marker.

	Labels already within max_length are returned unchanged.

	Raises:
		ValueError: If max_length is negative
	"""
	if max_length < 0:
		raise ValueError("max_length must be >= 0")
	if len(label) <= max_length:
		return label
	return f"{label[:max_length]}{marker}"


class LabelFormatter:
	"""Truncate labels with a fixed length and marker."""

	def __init__(self, max_length: int = DEFAULT_MAX_LENGTH, marker: str = ELLIPSIS) -> None:
		if max_length < 0:
			raise ValueError("max_length must be >= 0")
		self._max_length = max_length
		self._marker = marker

	@property
	def max_length(self) -> int:
		return self._max_length

	def truncate(self, label: str) -> str:
		return truncate(label, self._max_length, self._marker)

	def truncate_all(self, labels: Tuple[str, ...]) -> Tuple[str, ...]:
		return tuple(self.truncate(label) for label in labels)

	def apply(self, view: AggregateView) -> AggregateView:
		"""
		Return a copy of view with truncated labels.

		Counts are untouched. Two labels that truncate to the same text stay
		separate entries so labels and counts remain index-aligned.
		"""
		return AggregateView(labels=self.truncate_all(view.labels), counts=view.counts)
