'''
Orchestrator

Single responsibility: glue the pipeline together.

Responsibilities:
- Parse CLI arguments
- Call each pipeline stage in order
- Print chart payloads (JSON) or a Markdown summary to stdout

This file contains no business logic.

'''
import argparse
import json
import sys


def parse_args(argv=None):
	p = argparse.ArgumentParser(description="EVE alert aggregates for dashboards")
	p.add_argument("input", nargs="?", help="EVE JSON path (array or JSON lines)")
	p.add_argument("--sample", action="store_true")
	p.add_argument("--format", "-f", choices=["json", "markdown"], default="json")
	return p.parse_args(argv)


from EVE.Ingest.loader import load_events
from EVE.Normalize.normalize import build_snapshot
from EVE.Aggregate.engine import aggregate
from EVE.Render.chart_data import build_chart_payload
from EVE.Reporting.summary_renderer import render_summary


def main(argv=None) -> int:
	args = parse_args(argv)

	try:
		records = load_events(path=args.input, use_sample=args.sample)
	except (FileNotFoundError, ValueError) as e:
		print(f"Error loading events: {e}", file=sys.stderr)
		return 1

	snapshot = build_snapshot(records, source="sample" if args.sample else args.input)
	for rejected in snapshot.rejected:
		print(f"Warning: record {rejected.index} skipped: {rejected.reason}", file=sys.stderr)

	report = aggregate(snapshot)

	if args.format == "markdown":
		print(render_summary(report))
	else:
		print(json.dumps(build_chart_payload(report), indent=2, ensure_ascii=False))
	return 0


if __name__ == "__main__":
	sys.exit(main())
