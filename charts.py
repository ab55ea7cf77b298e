# charts.py
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle, Wedge
import structlog

from domain import EmployeeChartSlice

log = structlog.get_logger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DPI = 100

CHART_TITLE = "Employee Work Hours Distribution"
LEGEND_TITLE = "Employee Work Hours"

PADDING = 50
LEGEND_RESERVED = 300
LEGEND_OFFSET = 230
LEGEND_WIDTH = 200
LEGEND_TITLE_OFFSET = 25
LEGEND_LINE_HEIGHT = 20
COLOR_BOX_SIZE = 15
COLOR_BOX_PADDING = 5
TITLE_TOP = 10

# Smallest canvas that still leaves room for the pie next to the legend
MIN_WIDTH = LEGEND_RESERVED + 1
MIN_HEIGHT = 2 * PADDING + 1

MAX_LABEL_LENGTH = 25
TRUNCATED_LENGTH = 22
ELLIPSIS = "..."


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class LegendRow:
    y: float
    label: str
    color: Tuple[int, int, int]


def chart_layout(width: int, height: int) -> Tuple[Box, Box]:
    """Returns (chart area, legend area) for a canvas of the given size."""
    if width < MIN_WIDTH or height < MIN_HEIGHT:
        raise ValueError(
            f"Canvas {width}x{height} is too small; need at least {MIN_WIDTH}x{MIN_HEIGHT} pixels"
        )
    chart = Box(PADDING, PADDING, width - LEGEND_RESERVED, height - 2 * PADDING)
    legend = Box(width - LEGEND_OFFSET, PADDING, LEGEND_WIDTH, height - 2 * PADDING)
    return chart, legend


def wedge_angles(slices: Iterable[EmployeeChartSlice]) -> List[Tuple[float, float]]:
    """(start angle, sweep) in degrees for each slice, clockwise from 3 o'clock."""
    angles = []
    start = 0.0
    for s in slices:
        sweep = s.percentage * 3.6
        angles.append((start, sweep))
        start += sweep
    return angles


def legend_label(item: EmployeeChartSlice) -> str:
    text = f"{item.name} ({item.percentage:.1f}%)"
    if len(text) > MAX_LABEL_LENGTH:
        text = text[:TRUNCATED_LENGTH] + ELLIPSIS
    return text


def legend_rows(slices: Sequence[EmployeeChartSlice], area: Box) -> List[LegendRow]:
    """
    Lays the legend out as one column of fixed-height rows.

    Rows that would run past the bottom of the legend area are left out;
    there is no second column.
    """
    rows = []
    y = area.y
    for i, item in enumerate(slices):
        rows.append(LegendRow(y=y, label=legend_label(item), color=item.color))
        y += LEGEND_LINE_HEIGHT
        if y + LEGEND_LINE_HEIGHT > area.bottom and i < len(slices) - 1:
            break
    return rows


def _rgb(color: Tuple[int, int, int]) -> Tuple[float, float, float]:
    return tuple(c / 255 for c in color)


def _draw_pie(ax, slices: Sequence[EmployeeChartSlice], area: Box) -> None:
    cx, cy = area.center
    radius = min(area.width, area.height) / 2
    for item, (start, sweep) in zip(slices, wedge_angles(slices)):
        # y grows downwards, so increasing angles run clockwise on screen
        ax.add_patch(Wedge(
            (cx, cy), radius, start, start + sweep,
            facecolor=_rgb(item.color), edgecolor="black", linewidth=72 / DPI,
        ))


def _draw_legend(ax, slices: Sequence[EmployeeChartSlice], area: Box) -> None:
    ax.text(area.x, area.y - LEGEND_TITLE_OFFSET, LEGEND_TITLE,
            fontsize=10, fontweight="bold", color="black", ha="left", va="top")
    for row in legend_rows(slices, area):
        ax.add_patch(Rectangle(
            (area.x, row.y), COLOR_BOX_SIZE, COLOR_BOX_SIZE,
            facecolor=_rgb(row.color), edgecolor="black", linewidth=72 / DPI,
        ))
        ax.text(area.x + COLOR_BOX_SIZE + COLOR_BOX_PADDING, row.y, row.label,
                fontsize=10, color="black", ha="left", va="top")


def _draw_title(ax, width: int) -> None:
    ax.text(width / 2, TITLE_TOP, CHART_TITLE,
            fontsize=16, fontweight="bold", color="darkblue", ha="center", va="top")


def render_pie_chart(
    slices: Sequence[EmployeeChartSlice],
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> bytes:
    """Composes the full chart image and returns it PNG-encoded."""
    chart_area, legend_area = chart_layout(width, height)
    slices = list(slices)

    fig = plt.figure(figsize=(width / DPI, height / DPI), dpi=DPI, facecolor="white")
    try:
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_axis_off()

        _draw_pie(ax, slices, chart_area)
        _draw_legend(ax, slices, legend_area)
        _draw_title(ax, width)

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=DPI, facecolor="white")
    finally:
        plt.close(fig)

    log.info("chart_rendered", slices=len(slices), width=width, height=height)
    return buf.getvalue()


__all__ = [
    "MIN_HEIGHT",
    "MIN_WIDTH",
    "Box",
    "LegendRow",
    "chart_layout",
    "legend_label",
    "legend_rows",
    "render_pie_chart",
    "wedge_angles",
]
