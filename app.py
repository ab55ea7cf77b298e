# -----------------------------------------------
# ⏱️ Employee work hours dashboard (Streamlit)
# -----------------------------------------------
# Requires: streamlit, pandas, matplotlib, reportlab, requests, structlog
# Run with: streamlit run app.py

import streamlit as st

from charts import MIN_HEIGHT, MIN_WIDTH, render_pie_chart
from domain import TimeEntry
from reports import LOW_HOURS_THRESHOLD, render_html_table, render_pdf_report
from repository import SourceUnavailable, TimeEntryRepository, build_session
from services import build_report
from settings import configure_logging, load_settings
from utils import HOURS_COLUMN, summaries_to_dataframe

# =========================
# Configuration
# =========================
SETTINGS = load_settings()
configure_logging(SETTINGS.log_level)

APP_TITLE = "Employee work hours"

# =========================
# Data (cached per URL; the refresh button clears it)
# =========================
@st.cache_data(ttl=300, show_spinner="Fetching employee data...")
def fetch_entries(url: str, timeout: float, retries: int) -> list[TimeEntry]:
    repo = TimeEntryRepository(url, session=build_session(retries=retries), timeout=timeout)
    return repo.list_all()

# =========================
# Page config + header
# =========================
st.set_page_config(page_title=APP_TITLE, page_icon="⏱️", layout="centered")

st.markdown("""
<style>
.app-header {
  font-weight: 600;
  font-size: 1.5rem;
  line-height: 1.2;
  margin: 0.2rem 0 0.6rem 0;
}
</style>
""", unsafe_allow_html=True)

st.markdown(f'<div class="app-header">⏱️ {APP_TITLE}</div>', unsafe_allow_html=True)
st.caption(f"Total hours per employee. Rows under {LOW_HOURS_THRESHOLD:g} h are highlighted.")

with st.sidebar:
    width = st.number_input("Chart width (px)", min_value=MIN_WIDTH, max_value=2000, step=50, value=min(SETTINGS.chart_width, 2000))
    height = st.number_input("Chart height (px)", min_value=MIN_HEIGHT, max_value=1500, step=50, value=min(SETTINGS.chart_height, 1500))
    if st.button("Refresh data", use_container_width=True):
        fetch_entries.clear()

try:
    report = build_report(lambda: fetch_entries(SETTINGS.api_url, SETTINGS.timeout_s, SETTINGS.retries))
except SourceUnavailable as e:
    st.error(f"Could not load time entries: {e}")
    st.stop()

# =========================
# 📊 Summary
# =========================
c1, c2, c3 = st.columns(3)
c1.metric("Employees", len(report.summaries))
c2.metric("Entries", report.entry_count)
c3.metric("Total hours", f"{report.total_hours:.2f}")

if report.is_empty:
    st.info("No employees with worked hours.")

# =========================
# 🥧 Pie chart
# =========================
st.subheader("🥧 Distribution")
chart_png = render_pie_chart(report.slices, width=int(width), height=int(height))
st.image(chart_png, use_container_width=True)

# =========================
# 🗂️ Table
# =========================
st.subheader("🗂️ Total time worked")
df = summaries_to_dataframe(report.summaries)
st.dataframe(
    df,
    use_container_width=True,
    hide_index=True,
    column_config={HOURS_COLUMN: st.column_config.NumberColumn(format="%.2f")},
)

# =========================
# ⬇️ Downloads
# =========================
st.subheader("⬇️ Downloads")
d1, d2, d3 = st.columns(3)
d1.download_button(
    "Chart (PNG)", data=chart_png, file_name="employee_pie_chart.png",
    mime="image/png", use_container_width=True,
)
d2.download_button(
    "Table (HTML)", data=render_html_table(report.summaries).encode("utf-8"),
    file_name="employee_hours.html", mime="text/html", use_container_width=True,
)
d3.download_button(
    "Report (PDF)", data=render_pdf_report(report.summaries, chart_png=chart_png),
    file_name="employee_hours.pdf", mime="application/pdf", use_container_width=True,
)
