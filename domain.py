# domain.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime

# Fixed palette for chart segments, cycled by rank.
CHART_COLORS: tuple[tuple[int, int, int], ...] = (
    (255, 99, 132),   # red
    (54, 162, 235),   # blue
    (255, 205, 86),   # yellow
    (75, 192, 192),   # green
    (153, 102, 255),  # purple
    (255, 159, 64),   # orange
    (201, 203, 207),  # gray
    (255, 99, 255),   # pink
    (50, 168, 82),    # dark green
    (123, 36, 28),    # brown
)


@dataclass(frozen=True)
class TimeEntry:
    """Represents a single worked interval as reported by the time-entries API."""
    employee_name: str | None
    start_time_utc: datetime
    end_time_utc: datetime

    @property
    def has_employee(self) -> bool:
        """True when the entry names an employee (blank names do not count)."""
        return bool(self.employee_name and self.employee_name.strip())


@dataclass(frozen=True)
class EmployeeSummary:
    """Total hours worked by one employee across all of their entries."""
    name: str
    total_hours: float

    @property
    def rounded_hours(self) -> float:
        return round(self.total_hours, 2)


@dataclass(frozen=True)
class EmployeeChartSlice(EmployeeSummary):
    """A summary with its share of the grand total and its palette slot."""
    percentage: float = 0.0
    color_index: int = 0

    @property
    def color(self) -> tuple[int, int, int]:
        return CHART_COLORS[self.color_index % len(CHART_COLORS)]
