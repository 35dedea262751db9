"""
Grouping rules.

Turns a normalized AlertEvent into the bucket label used by each
aggregate view, including the sentinel buckets for unusable fields.
"""

import os
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from EVE.Normalize.models import AlertEvent

__all__ = ["AggregationConfigLoader", "TimeBucketFormatter", "GroupingRules", "default_config_path"]


def default_config_path() -> str:
	aggregate_dir = os.path.dirname(__file__)
	return os.path.join(aggregate_dir, "config.yml")


class AggregationConfigLoader:
	"""Load aggregation configuration (labels, time buckets, severity)."""

	def __init__(self, config_path: str) -> None:
		self._config_path = config_path
		self._config = self._load()

	def _load(self) -> Dict[str, Any]:
		if not os.path.isfile(self._config_path):
			raise FileNotFoundError(f"Aggregation config not found: {self._config_path}")
		with open(self._config_path, "r", encoding="utf-8") as f:
			return yaml.safe_load(f) or {}

	@property
	def label_config(self) -> Dict[str, Any]:
		return self._config.get("labels", {}) or {}

	@property
	def time_config(self) -> Dict[str, Any]:
		return self._config.get("time", {}) or {}

	@property
	def severity_config(self) -> Dict[str, Any]:
		return self._config.get("severity", {}) or {}

	def get_max_label_length(self) -> int:
		return int(self.label_config.get("max_length", 14))

	def get_label_marker(self) -> str:
		return str(self.label_config.get("marker", "..."))

	def get_unknown_label(self) -> str:
		return str(self.label_config.get("unknown", "unknown"))

	def get_time_format(self) -> str:
		return str(self.time_config.get("format", "%H:%M:%S"))

	def get_timezone_name(self) -> str:
		return str(self.time_config.get("timezone", "UTC"))

	def get_invalid_time_label(self) -> str:
		return str(self.time_config.get("invalid", "invalid-time"))

	def get_severity_prefix(self) -> str:
		return str(self.severity_config.get("label_prefix", "Severity"))


class TimeBucketFormatter:
	"""Format event times as time-of-day bucket labels."""

	def __init__(self, config_loader: AggregationConfigLoader) -> None:
		self._format = config_loader.get_time_format()
		self._zone = self._resolve_zone(config_loader.get_timezone_name())

	@staticmethod
	def _resolve_zone(name: str) -> Optional[tzinfo]:
		"""
		Resolve a configured zone name.

		Returns None for "local", meaning the host's local time.

		Raises:
			ValueError: If the zone name is unknown
		"""
		if name.lower() == "local":
			return None
		if name.upper() == "UTC":
			return timezone.utc
		try:
			return ZoneInfo(name)
		except (ZoneInfoNotFoundError, ValueError) as exc:
			raise ValueError(f"unknown timezone in aggregation config: {name!r}") from exc

	def format(self, moment: datetime) -> str:
		return moment.astimezone(self._zone).strftime(self._format)


class GroupingRules:
	"""Bucket label for each grouping, with sentinel fallbacks."""

	def __init__(self, config_loader: AggregationConfigLoader) -> None:
		self._unknown = config_loader.get_unknown_label()
		self._invalid_time = config_loader.get_invalid_time_label()
		self._severity_prefix = config_loader.get_severity_prefix()
		self._time_formatter = TimeBucketFormatter(config_loader)

	def time_label(self, event: AlertEvent) -> str:
		if event.timestamp is None:
			return self._unknown
		if event.occurred_at is None:
			return self._invalid_time
		try:
			return self._time_formatter.format(event.occurred_at)
		except (OverflowError, OSError, ValueError):
			# Zone shift pushed the instant past datetime.min or datetime.max
			return self._invalid_time

	def signature_label(self, event: AlertEvent) -> str:
		return event.signature if event.signature is not None else self._unknown

	def category_label(self, event: AlertEvent) -> str:
		return event.category if event.category is not None else self._unknown

	def severity_label(self, event: AlertEvent) -> str:
		if event.severity is None:
			return self._unknown
		return f"{self._severity_prefix} {event.severity}"

	def revision_label(self, event: AlertEvent) -> str:
		if event.rev is None:
			return self._unknown
		return str(event.rev)
