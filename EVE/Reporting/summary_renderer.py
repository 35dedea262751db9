"""
Markdown Summary Renderer

Purpose: Human-readable digest of one aggregation pass.

Responsibilities:
- Transform an AggregateReport into template-friendly rows
- Load and render the Jinja2 template
- Return Markdown text; the caller decides where it goes

Design notes:
- Jinja2 templates for flexible formatting
- Graceful fallback to an inline template if the file is missing
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, Template, TemplateNotFound, select_autoescape

from EVE.Aggregate.views import AggregateReport, AggregateView

__all__ = ["render_summary"]


SECTION_TITLES = {
	"time": ("Alerts Over Time", "Time"),
	"signature": ("Alerts per Signature", "Signature"),
	"category": ("Alert Categories", "Category"),
	"severity": ("Alerts per Severity", "Severity"),
}


class SummaryDataTransformer:
	"""Transform an AggregateReport into template context."""

	def __init__(self, report: AggregateReport) -> None:
		self._report = report

	def transform_snapshot(self) -> Dict[str, Any]:
		return {
			"id": self._report.snapshot_id,
			"event_count": self._report.event_count,
			"rejected_count": self._report.rejected_count,
		}

	@staticmethod
	def transform_rows(view: AggregateView) -> List[Dict[str, Any]]:
		# Pipes would break the Markdown table
		return [
			{"label": label.replace("|", "\\|"), "count": count}
			for label, count in zip(view.labels, view.counts)
		]

	def transform_sections(self) -> List[Dict[str, Any]]:
		sections = []
		for name, view in self._report.rendered_views().items():
			title, heading = SECTION_TITLES.get(name, (name.title(), name.title()))
			sections.append({
				"name": name,
				"title": title,
				"heading": heading,
				"rows": self.transform_rows(view),
			})
		return sections

	def transform(self) -> Dict[str, Any]:
		return {
			"snapshot": self.transform_snapshot(),
			"sections": self.transform_sections(),
			"summary_generated_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
		}


class MarkdownTemplateLoader:
	"""Load the Jinja2 template for Markdown rendering."""

	TEMPLATE_FILE = "aggregate_summary.md.j2"

	def __init__(self, template_dir: str = "") -> None:
		self._template_dir = template_dir or self._get_template_dir()

	def _get_template_dir(self) -> str:
		reporting_dir = os.path.dirname(__file__)
		return os.path.join(reporting_dir, "templates")

	def _create_inline_fallback(self) -> str:
		"""Plain template used when the template file is missing."""
		return """# Alert Summary: {{ snapshot.id }}

- Events aggregated: {{ snapshot.event_count }}
- Records rejected: {{ snapshot.rejected_count }}
{% for section in sections %}

## {{ section.title }}

{% for row in section.rows %}
- {{ row.label }}: {{ row.count }}
{% else %}
No alerts.
{% endfor %}
{% endfor %}
"""

	def _environment(self, **kwargs: Any) -> Environment:
		return Environment(
			autoescape=select_autoescape(['html', 'xml'], default_for_string=False),
			trim_blocks=True,
			lstrip_blocks=True,
			**kwargs
		)

	def load_template(self) -> Template:
		"""Load the template file, or the inline fallback if it is missing."""
		if os.path.isfile(os.path.join(self._template_dir, self.TEMPLATE_FILE)):
			env = self._environment(loader=FileSystemLoader(self._template_dir))
			try:
				return env.get_template(self.TEMPLATE_FILE)
			except TemplateNotFound:
				pass
		return self._environment().from_string(self._create_inline_fallback())


def render_summary(report: AggregateReport, template_dir: str = "") -> str:
	"""
	Render a Markdown summary of report.

	Args:
		report: Output of the aggregation engine
		template_dir: Directory holding aggregate_summary.md.j2 (defaults to
			the packaged templates)

	Returns:
		Markdown text

	Raises:
		ValueError: If report is not an AggregateReport
	"""
	if not isinstance(report, AggregateReport):
		raise ValueError("report must be an AggregateReport")

	context = SummaryDataTransformer(report).transform()
	template = MarkdownTemplateLoader(template_dir).load_template()
	return template.render(**context)
