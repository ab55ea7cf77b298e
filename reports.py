# reports.py
from __future__ import annotations

import html
import io
from typing import Iterable

import structlog
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from domain import EmployeeSummary
from utils import HOURS_COLUMN, NAME_COLUMN, format_hours, summaries_to_dataframe

log = structlog.get_logger(__name__)

REPORT_TITLE = "Employee Time Worked"
LOW_HOURS_THRESHOLD = 100.0
LOW_HOURS_CLASS = "low-hours"

HTML_STYLE = """
body {
  font-family: Arial, Helvetica, sans-serif;
  margin: 2rem;
  color: #222;
}
h1 {
  font-weight: 600;
  font-size: 1.5rem;
  margin: 0.2rem 0 1rem 0;
}
table {
  border-collapse: collapse;
  min-width: 420px;
}
th, td {
  border: 1px solid #E0E0E0;
  padding: 6px 12px;
  text-align: left;
}
th {
  background: #F5F5F7;
}
td.hours {
  text-align: right;
}
tr.low-hours td {
  background: #FDE2E1;
}
"""


def is_low_hours(hours: float) -> bool:
    return hours < LOW_HOURS_THRESHOLD


def render_html_table(summaries: Iterable[EmployeeSummary], title: str = REPORT_TITLE) -> str:
    """Standalone HTML page with one table row per summary, in the given order."""
    df = summaries_to_dataframe(summaries)
    rows = []
    for name, hours in df[[NAME_COLUMN, HOURS_COLUMN]].itertuples(index=False, name=None):
        css = f' class="{LOW_HOURS_CLASS}"' if is_low_hours(hours) else ""
        rows.append(
            f'<tr{css}><td>{html.escape(str(name), quote=True)}</td>'
            f'<td class="hours">{format_hours(hours)}</td></tr>'
        )

    safe_title = html.escape(title)
    doc = "\n".join([
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{safe_title}</title>",
        f"<style>{HTML_STYLE}</style>",
        "</head>",
        "<body>",
        f"<h1>{safe_title}</h1>",
        "<table>",
        f"<thead><tr><th>{html.escape(NAME_COLUMN)}</th><th>{html.escape(HOURS_COLUMN)}</th></tr></thead>",
        "<tbody>",
        *rows,
        "</tbody>",
        "</table>",
        "</body>",
        "</html>",
        "",
    ])
    log.info("html_rendered", rows=len(rows))
    return doc


def render_pdf_report(
    summaries: Iterable[EmployeeSummary],
    chart_png: bytes | None = None,
    title: str = REPORT_TITLE,
) -> bytes:
    """Printable version of the summary table, optionally followed by the pie chart."""
    df = summaries_to_dataframe(summaries)

    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, topMargin=24, bottomMargin=24, leftMargin=24, rightMargin=24)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(name="TitleCentered", parent=styles["Title"], alignment=TA_CENTER)
    cell_style = ParagraphStyle(name="Cell", parent=styles["Normal"], fontSize=10, leading=12)

    story = [Paragraph(html.escape(title), title_style), Spacer(1, 8)]
    if df.empty:
        story.append(Paragraph("No data to show.", styles["Normal"]))
    else:
        data = [[NAME_COLUMN, HOURS_COLUMN]]
        low_rows = []
        for i, (name, hours) in enumerate(df[[NAME_COLUMN, HOURS_COLUMN]].itertuples(index=False, name=None), start=1):
            # Paragraph parses markup, so names are escaped
            data.append([Paragraph(html.escape(str(name)), cell_style), format_hours(hours)])
            if is_low_hours(hours):
                low_rows.append(i)
        data.append(["Total", format_hours(float(df[HOURS_COLUMN].sum()))])

        table_style = [
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F5F5F7")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#E0E0E0")),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]
        for r in low_rows:
            table_style.append(("BACKGROUND", (0, r), (-1, r), colors.HexColor("#FDE2E1")))

        table = Table(data, repeatRows=1, hAlign="CENTER", colWidths=[9 * cm, 6 * cm])
        table.setStyle(TableStyle(table_style))
        story.append(table)

    if chart_png:
        iw, ih = ImageReader(io.BytesIO(chart_png)).getSize()
        img_width = min(doc.width, 16 * cm)
        story += [Spacer(1, 16), Image(io.BytesIO(chart_png), width=img_width, height=img_width * ih / iw)]

    doc.build(story)
    log.info("pdf_rendered", rows=len(df), with_chart=bool(chart_png))
    return buf.getvalue()


__all__ = [
    "LOW_HOURS_THRESHOLD",
    "REPORT_TITLE",
    "is_low_hours",
    "render_html_table",
    "render_pdf_report",
]
