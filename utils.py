# utils.py
import pandas as pd
from typing import Iterable
from domain import EmployeeSummary

NAME_COLUMN = "Name"
HOURS_COLUMN = "Total Time Worked (Hours)"

def summaries_to_dataframe(summaries: Iterable[EmployeeSummary]) -> pd.DataFrame:
    """Table view of the ranked summaries. Keeps the given order."""
    rows = []
    for s in summaries:
        rows.append({
            NAME_COLUMN: s.name,
            HOURS_COLUMN: s.rounded_hours,
        })
    return pd.DataFrame(rows, columns=[NAME_COLUMN, HOURS_COLUMN])

def format_hours(hours: float) -> str:
    """Two decimals with a dot separator, whatever the host locale is."""
    return f"{hours:.2f}"
