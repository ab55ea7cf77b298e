# services.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List

import structlog

from domain import CHART_COLORS, EmployeeChartSlice, EmployeeSummary, TimeEntry

log = structlog.get_logger(__name__)


def color_index_for_rank(rank: int) -> int:
    """Palette slot for the employee at `rank` (0 = most hours)."""
    return rank % len(CHART_COLORS)


class EmployeeHoursAggregator:
    """Business rules for turning raw time entries into ranked per-employee totals."""

    def calculate_hours_worked(self, start: datetime, end: datetime) -> float:
        """Returns worked hours. Inverted or empty intervals count as zero, never negative."""
        if start >= end:
            return 0.0
        return (end - start).total_seconds() / 3600.0

    def normalize(self, entries: Iterable[TimeEntry]) -> List[TimeEntry]:
        """Drops entries without an employee name."""
        return [e for e in entries if e.has_employee]

    def summarize(self, entries: Iterable[TimeEntry]) -> List[EmployeeSummary]:
        """
        Groups entries by exact employee name and sums their hours.
        Employees with no positive total are dropped; the rest are ordered by
        total hours descending, ties keeping first-seen order.
        """
        totals: Dict[str, float] = {}
        for e in self.normalize(entries):
            totals[e.employee_name] = totals.get(e.employee_name, 0.0) + self.calculate_hours_worked(
                e.start_time_utc, e.end_time_utc
            )

        summaries = [EmployeeSummary(name=n, total_hours=h) for n, h in totals.items() if h > 0]
        # sorted() is stable with reverse=True as well
        summaries = sorted(summaries, key=lambda s: s.total_hours, reverse=True)
        log.debug("entries_summarized", employees=len(summaries), dropped=len(totals) - len(summaries))
        return summaries

    def chart_slices(self, summaries: Iterable[EmployeeSummary]) -> List[EmployeeChartSlice]:
        """Annotates ranked summaries with their percentage share and palette color."""
        ranked = [s for s in summaries if s.total_hours > 0]
        grand_total = sum(s.total_hours for s in ranked)
        if grand_total <= 0:
            return []

        slices = []
        for rank, s in enumerate(ranked):
            idx = color_index_for_rank(rank)
            slices.append(EmployeeChartSlice(
                name=s.name,
                total_hours=s.total_hours,
                percentage=s.total_hours / grand_total * 100,
                color_index=idx,
            ))
        return slices


@dataclass(frozen=True)
class HoursReport:
    """Everything the renderers need from one pipeline run."""
    summaries: List[EmployeeSummary] = field(default_factory=list)
    slices: List[EmployeeChartSlice] = field(default_factory=list)
    entry_count: int = 0

    @property
    def total_hours(self) -> float:
        return sum(s.total_hours for s in self.summaries)

    @property
    def is_empty(self) -> bool:
        return not self.summaries


def build_report(
    fetch_entries: Callable[[], Iterable[TimeEntry]],
    aggregator: EmployeeHoursAggregator | None = None,
) -> HoursReport:
    """Runs the fetch once, then aggregates. Fetch errors propagate untouched."""
    aggregator = aggregator or EmployeeHoursAggregator()
    entries = list(fetch_entries())
    summaries = aggregator.summarize(entries)
    slices = aggregator.chart_slices(summaries)
    log.info("report_built", entries=len(entries), employees=len(summaries))
    return HoursReport(summaries=summaries, slices=slices, entry_count=len(entries))


__all__ = [
    "CHART_COLORS",
    "EmployeeHoursAggregator",
    "HoursReport",
    "build_report",
    "color_index_for_rank",
]
