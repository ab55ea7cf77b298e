#!/usr/bin/env python3
"""
Fetch time entries and export the employee hours chart and table.

Usage:
  employee-hours-report
  employee-hours-report --output-dir reports --pdf
  employee-hours-report --url http://localhost:8000/entries.json --width 1024 --height 768
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

import structlog

from charts import MIN_HEIGHT, MIN_WIDTH, render_pie_chart
from reports import render_html_table, render_pdf_report
from repository import SourceUnavailable, TimeEntryRepository, build_session
from services import build_report
from settings import configure_logging, load_settings

log = structlog.get_logger(__name__)


def _pixels(minimum: int):
    def parse(value: str) -> int:
        try:
            n = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid pixel count: {value!r}")
        if n < minimum:
            raise argparse.ArgumentTypeError(f"must be at least {minimum} pixels, got {n}")
        return n
    return parse


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    ap = argparse.ArgumentParser(description="Export per-employee worked hours as a pie chart and an HTML table.")
    ap.add_argument("--url", default=settings.api_url, help="Time entries endpoint (JSON array)")
    ap.add_argument("--timeout", type=float, default=settings.timeout_s, help="HTTP timeout in seconds")
    ap.add_argument("--retries", type=int, default=settings.retries, help="Transport retries for the fetch")
    ap.add_argument("--width", type=_pixels(MIN_WIDTH), default=settings.chart_width, help="Chart width in pixels")
    ap.add_argument("--height", type=_pixels(MIN_HEIGHT), default=settings.chart_height, help="Chart height in pixels")
    ap.add_argument("--output-dir", default=str(settings.data_dir), help="Folder for the exported files")
    ap.add_argument("--chart-name", default="employee_pie_chart.png")
    ap.add_argument("--table-name", default="employee_hours.html")
    ap.add_argument("--pdf", action="store_true", help="Also write employee_hours.pdf")
    ap.add_argument("--log-level", default=settings.log_level)
    return ap


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    repo = TimeEntryRepository(args.url, session=build_session(retries=args.retries), timeout=args.timeout)
    print("Fetching employee data...")
    try:
        report = build_report(repo.list_all)
    except SourceUnavailable as e:
        log.error("fetch_failed", url=args.url, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    print("Generating pie chart...")
    png = render_pie_chart(report.slices, width=args.width, height=args.height)
    chart_path = out_dir / args.chart_name
    chart_path.write_bytes(png)

    table_path = out_dir / args.table_name
    table_path.write_text(render_html_table(report.summaries), encoding="utf-8")

    written = [chart_path, table_path]
    if args.pdf:
        pdf_path = out_dir / "employee_hours.pdf"
        pdf_path.write_bytes(render_pdf_report(report.summaries, chart_png=png))
        written.append(pdf_path)

    print(f"Employees: {len(report.summaries)} · Entries: {report.entry_count} · Hours: {report.total_hours:.2f}")
    for p in written:
        print(f"File saved as: {p.resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
