# repository.py
from __future__ import annotations

import re
from datetime import datetime
from typing import Any, List

import pandas as pd
import requests
import structlog
from requests.adapters import HTTPAdapter

from domain import TimeEntry

log = structlog.get_logger(__name__)

# The remote API spells the start field "StarTimeUtc"; the corrected spelling is accepted too.
START_FIELDS = ("StarTimeUtc", "StartTimeUtc")
END_FIELD = "EndTimeUtc"
NAME_FIELD = "EmployeeName"

# ISO-8601 timestamps start with a calendar date
ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


class SourceUnavailable(RuntimeError):
    """The time-entries endpoint could not be read."""


def build_session(retries: int = 0, user_agent: str = "employee-hours-report") -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json", "User-Agent": user_agent})
    if retries > 0:
        adapter = HTTPAdapter(max_retries=retries)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
    return session


def parse_utc_timestamp(value: Any) -> datetime | None:
    """ISO-8601 text to an aware UTC datetime. Naive values are taken as UTC."""
    if not isinstance(value, str) or not ISO_DATE_PREFIX.match(value.strip()):
        return None
    try:
        ts = pd.Timestamp(value.strip())
    except (ValueError, TypeError):
        return None
    if pd.isna(ts):
        return None
    ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
    return ts.to_pydatetime()


def entry_from_record(record: Any) -> TimeEntry | None:
    """Maps one raw JSON record to a TimeEntry, or None when it can't be used."""
    if not isinstance(record, dict):
        log.warning("record_skipped", reason="not an object", record=repr(record)[:80])
        return None

    raw_start = next((record[k] for k in START_FIELDS if record.get(k) is not None), None)
    start = parse_utc_timestamp(raw_start)
    end = parse_utc_timestamp(record.get(END_FIELD))
    if start is None or end is None:
        log.warning(
            "record_skipped",
            reason="missing or unparseable timestamp",
            employee=record.get(NAME_FIELD),
            start=raw_start,
            end=record.get(END_FIELD),
        )
        return None

    name = record.get(NAME_FIELD)
    return TimeEntry(
        employee_name=str(name) if name is not None else None,
        start_time_utc=start,
        end_time_utc=end,
    )


class TimeEntryRepository:
    """Read-only access to the remote time-entries endpoint."""
    def __init__(self, url: str, session: requests.Session | None = None, timeout: float = 10.0):
        self.url = url
        self.session = session or build_session()
        self.timeout = timeout

    def fetch_records(self) -> List[Any]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SourceUnavailable(f"Could not fetch time entries: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SourceUnavailable(f"Time entries response is not valid JSON: {e}") from e

        if payload is None:
            return []
        if not isinstance(payload, list):
            raise SourceUnavailable(
                f"Time entries response must be a JSON array, got {type(payload).__name__}"
            )
        return payload

    def list_all(self) -> List[TimeEntry]:
        records = self.fetch_records()
        entries = []
        for r in records:
            entry = entry_from_record(r)
            if entry is not None:
                entries.append(entry)
        log.info("entries_fetched", records=len(records), usable=len(entries))
        return entries


__all__ = [
    "SourceUnavailable",
    "TimeEntryRepository",
    "build_session",
    "entry_from_record",
    "parse_utc_timestamp",
]
