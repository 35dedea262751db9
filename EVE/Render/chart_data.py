'''
Chart Payloads

Purpose: Shape aggregate views for the charting layer.

Responsibilities:
- Pair each rendered view with its chart kind and dataset title
- Truncate signature labels before they reach a bar axis
- Attach palette colors from charts.yml

This module draws nothing; the output is plain dicts that bind directly
into Chart.js-style {labels, datasets} objects.
'''

import os
from typing import Any, Dict, List

import yaml

from EVE.Aggregate.labels import LabelFormatter
from EVE.Aggregate.rules import AggregationConfigLoader, default_config_path
from EVE.Aggregate.views import AggregateReport, AggregateView

__all__ = ["ChartConfigLoader", "ChartPayloadBuilder", "build_chart_payload"]


DEFAULT_KINDS = {"time": "line", "signature": "bar", "category": "pie", "severity": "doughnut"}


def _build_config_path() -> str:
	render_dir = os.path.dirname(__file__)
	return os.path.join(render_dir, "charts.yml")


class ChartConfigLoader:
	"""Load per-view chart settings."""

	def __init__(self, config_path: str) -> None:
		self._config_path = config_path
		self._config = self._load()

	def _load(self) -> Dict[str, Any]:
		if not os.path.isfile(self._config_path):
			raise FileNotFoundError(f"Chart config not found: {self._config_path}")
		with open(self._config_path, "r", encoding="utf-8") as f:
			return yaml.safe_load(f) or {}

	def get_chart(self, view_name: str) -> Dict[str, Any]:
		charts = self._config.get("charts", {}) or {}
		chart = charts.get(view_name, {})
		return chart if isinstance(chart, dict) else {}

	def get_kind(self, view_name: str) -> str:
		return str(self.get_chart(view_name).get("kind", DEFAULT_KINDS.get(view_name, "bar")))

	def get_title(self, view_name: str) -> str:
		return str(self.get_chart(view_name).get("title", view_name.title()))

	def should_truncate(self, view_name: str) -> bool:
		return bool(self.get_chart(view_name).get("truncate_labels", False))


class ChartPayloadBuilder:
	"""Build one chart payload per rendered view."""

	def __init__(self, config_loader: ChartConfigLoader, label_formatter: LabelFormatter) -> None:
		self._config = config_loader
		self._formatter = label_formatter

	def _dataset(self, view_name: str, view: AggregateView) -> Dict[str, Any]:
		chart = self._config.get_chart(view_name)
		dataset: Dict[str, Any] = {
			"label": self._config.get_title(view_name),
			"data": list(view.counts),
		}
		if "background_color" in chart:
			dataset["backgroundColor"] = chart["background_color"]
		if "border_color" in chart:
			dataset["borderColor"] = chart["border_color"]
		return dataset

	def build_one(self, view_name: str, view: AggregateView) -> Dict[str, Any]:
		if self._config.should_truncate(view_name):
			view = self._formatter.apply(view)
		labels: List[str] = list(view.labels)
		return {
			"kind": self._config.get_kind(view_name),
			"title": self._config.get_title(view_name),
			"labels": labels,
			"datasets": [self._dataset(view_name, view)],
		}

	def build(self, report: AggregateReport) -> Dict[str, Dict[str, Any]]:
		"""
		Build payloads for time, signature, category and severity.

		The revision view has no chart and is not included.
		"""
		return {name: self.build_one(name, view) for name, view in report.rendered_views().items()}


_CONFIG_LOADER: ChartConfigLoader | None = None
_BUILDER: ChartPayloadBuilder | None = None


def _get_components():
	global _CONFIG_LOADER, _BUILDER
	if _CONFIG_LOADER is None:
		aggregation_config = AggregationConfigLoader(default_config_path())
		formatter = LabelFormatter(aggregation_config.get_max_label_length(), aggregation_config.get_label_marker())
		_CONFIG_LOADER = ChartConfigLoader(_build_config_path())
		_BUILDER = ChartPayloadBuilder(_CONFIG_LOADER, formatter)
	return _CONFIG_LOADER, _BUILDER


def build_chart_payload(report: AggregateReport) -> Dict[str, Dict[str, Any]]:
	"""Chart payloads for report using the packaged configuration."""
	_, builder = _get_components()
	return builder.build(report)
