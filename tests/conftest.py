from datetime import datetime, timezone

import pytest

from domain import TimeEntry


def at(hhmm: str, day: int = 1) -> datetime:
    hh, mm = hhmm.split(":")
    return datetime(2024, 3, day, int(hh), int(mm), tzinfo=timezone.utc)


@pytest.fixture
def entry():
    def _make(name, start, end, day=1):
        return TimeEntry(employee_name=name, start_time_utc=at(start, day), end_time_utc=at(end, day))
    return _make
