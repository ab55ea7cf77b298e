import pytest

from domain import EmployeeSummary
from services import CHART_COLORS, EmployeeHoursAggregator, build_report, color_index_for_rank


def test_calculate_hours_worked_regular_interval(entry):
    e = entry("Alice", "09:00", "17:30")
    assert EmployeeHoursAggregator().calculate_hours_worked(e.start_time_utc, e.end_time_utc) == 8.5


def test_calculate_hours_worked_inverted_or_empty_is_zero(entry):
    calc = EmployeeHoursAggregator()
    same = entry("Bob", "09:00", "09:00")
    inverted = entry("Bob", "17:00", "09:00")
    assert calc.calculate_hours_worked(same.start_time_utc, same.end_time_utc) == 0.0
    assert calc.calculate_hours_worked(inverted.start_time_utc, inverted.end_time_utc) == 0.0


def test_normalize_drops_blank_names(entry):
    entries = [
        entry("Alice", "09:00", "10:00"),
        entry(None, "09:00", "10:00"),
        entry("", "09:00", "10:00"),
        entry("   ", "09:00", "10:00"),
    ]
    kept = EmployeeHoursAggregator().normalize(entries)
    assert [e.employee_name for e in kept] == ["Alice"]


def test_summarize_end_to_end_example(entry):
    entries = [
        entry("Alice", "09:00", "17:00"),
        entry("Bob", "09:00", "09:00"),
        entry("Alice", "08:00", "08:30"),
    ]
    agg = EmployeeHoursAggregator()
    summaries = agg.summarize(entries)
    assert summaries == [EmployeeSummary(name="Alice", total_hours=8.5)]

    slices = agg.chart_slices(summaries)
    assert len(slices) == 1
    assert slices[0].percentage == pytest.approx(100.0)


def test_summarize_ranks_descending_with_stable_ties(entry):
    entries = [
        entry("Carol", "09:00", "11:00"),
        entry("Dave", "09:00", "12:00"),
        entry("Erin", "09:00", "11:00"),
        entry("Frank", "09:00", "10:00"),
    ]
    names = [s.name for s in EmployeeHoursAggregator().summarize(entries)]
    assert names == ["Dave", "Carol", "Erin", "Frank"]


def test_summarize_is_case_sensitive_and_excludes_all_invalid(entry):
    entries = [
        entry("alice", "09:00", "10:00"),
        entry("Alice", "09:00", "11:00"),
        entry("Ghost", "12:00", "08:00"),
        entry("Ghost", "08:00", "08:00"),
    ]
    summaries = EmployeeHoursAggregator().summarize(entries)
    assert [(s.name, s.total_hours) for s in summaries] == [("Alice", 2.0), ("alice", 1.0)]


def test_summarize_totals_do_not_depend_on_entry_order(entry):
    entries = [
        entry("Alice", "09:00", "10:15"),
        entry("Bob", "09:00", "13:00"),
        entry("Alice", "11:00", "14:00", day=2),
        entry("Bob", "08:00", "08:45", day=3),
    ]
    agg = EmployeeHoursAggregator()
    forward = {s.name: s.total_hours for s in agg.summarize(entries)}
    backward = {s.name: s.total_hours for s in agg.summarize(list(reversed(entries)))}
    assert forward == pytest.approx(backward)
    assert forward == pytest.approx({"Alice": 4.25, "Bob": 4.75})


def test_chart_slices_percentages_sum_to_100(entry):
    entries = [
        entry("A", "09:00", "10:07"),
        entry("B", "09:00", "12:13"),
        entry("C", "09:00", "09:01"),
        entry("D", "01:00", "23:59"),
        entry("E", "09:00", "09:33"),
    ]
    agg = EmployeeHoursAggregator()
    slices = agg.chart_slices(agg.summarize(entries))
    assert abs(sum(s.percentage for s in slices) - 100.0) < 1e-9
    assert all(0 < s.percentage <= 100 for s in slices)


def test_chart_slices_empty_without_positive_hours(entry):
    agg = EmployeeHoursAggregator()
    assert agg.chart_slices([]) == []
    assert agg.chart_slices(agg.summarize([entry("Bob", "10:00", "09:00")])) == []


def test_colors_cycle_by_rank():
    summaries = [EmployeeSummary(name=f"E{i:02d}", total_hours=100 - i) for i in range(23)]
    agg = EmployeeHoursAggregator()
    slices = agg.chart_slices(summaries)
    for rank, s in enumerate(slices):
        assert s.color_index == rank % len(CHART_COLORS)
        assert s.color == CHART_COLORS[rank % len(CHART_COLORS)]
    assert color_index_for_rank(10) == 0
    assert color_index_for_rank(13) == 3
    # same input, same colors
    assert [s.color for s in agg.chart_slices(summaries)] == [s.color for s in slices]


def test_build_report_uses_injected_fetch(entry):
    calls = []

    def fetch():
        calls.append(1)
        return [entry("Alice", "09:00", "17:00"), entry("", "09:00", "17:00")]

    report = build_report(fetch)
    assert calls == [1]
    assert report.entry_count == 2
    assert [s.name for s in report.summaries] == ["Alice"]
    assert report.total_hours == 8.0
    assert not report.is_empty


def test_build_report_empty_source():
    report = build_report(lambda: [])
    assert report.is_empty
    assert report.slices == []
    assert report.total_hours == 0


def test_build_report_propagates_fetch_errors():
    def fetch():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        build_report(fetch)
