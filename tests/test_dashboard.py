"""
End-to-end tests for the PPH report, the planning snapshot and the shift
overview.
"""

import pandas as pd
import pytest

from shift_dashboard.config import PLANNING_COLUMNS
from shift_dashboard.dashboard import (
    format_duration,
    generate_pph_report,
    get_available_dates,
    get_available_times,
    get_planning_snapshot,
    get_shift_history_summary,
    get_shift_overview,
    get_task_completion,
)
from shift_dashboard.loaders import load_routing_csv, load_snapshot_csv
from shift_dashboard.models import SelectionWindow, ShiftData, ShiftTask, Status
from shift_dashboard.registry import TargetRegistry

T = pd.Timestamp


def _window(start="2024-03-01 08:00", end="2024-03-01 10:00", **kwargs):
    return SelectionWindow(T(start), T(end), **kwargs)


class TestGeneratePPHReport:

    def test_dock_scenario(self, dock_csv):
        result = load_routing_csv(dock_csv)
        registry = TargetRegistry({"DOCK1": 100})
        report = generate_pph_report(result.series, result.time_index, _window(), registry)

        assert len(report.rows) == 1
        row = report.rows[0]
        assert row.increase == 300
        assert report.net_hours == pytest.approx(2.0)
        assert row.pph == 150
        assert row.status == Status.TOP
        assert report.start_label == "01/03 - 08:00"
        assert report.end_label == "01/03 - 10:00"
        assert report.window_valid

    def test_dock_scenario_with_break(self, dock_csv, empty_registry):
        result = load_routing_csv(dock_csv)
        window = _window(break_enabled=True, break_start="08:30", break_end="09:00")
        report = generate_pph_report(result.series, result.time_index, window, empty_registry)
        assert report.net_hours == pytest.approx(1.5)
        assert report.rows[0].pph == 200

    def test_single_observation_station(self, empty_registry):
        text = "\n".join([
            "h;h;h;h;h;h;h;h;h",
            "01/03/2024;08:00;A;0;0;0;0;0;0",
            "01/03/2024;10:00;A;0;0;0;0;0;400",
            "01/03/2024;09:00;LONE;0;0;0;0;0;75",
        ])
        result = load_routing_csv(text)
        report = generate_pph_report(result.series, result.time_index, _window(), empty_registry)

        lone = next(r for r in report.rows if r.name == "LONE")
        assert lone.start is lone.end
        assert lone.increase == 0
        assert lone.pph == 0
        assert lone.status == Status.LOW

    def test_default_target(self, dock_csv, empty_registry):
        result = load_routing_csv(dock_csv)
        report = generate_pph_report(result.series, result.time_index, _window(), empty_registry)
        assert report.rows[0].target == 200
        assert report.rows[0].status == Status.GOOD

    def test_registry_lookup_ignores_case_and_spaces(self, dock_csv):
        result = load_routing_csv(dock_csv)
        registry = TargetRegistry({"  dock1 ": 300})
        report = generate_pph_report(result.series, result.time_index, _window(), registry)
        assert report.rows[0].target == 300

    def test_rows_sorted_and_totals_consistent(self, empty_registry):
        text = "\n".join([
            "h;h;h;h;h;h;h;h;h",
            "01/03/2024;08:00;SLOW;0;0;0;0;0;0",
            "01/03/2024;08:00;FAST;0;0;0;0;0;0",
            "01/03/2024;08:00;MID;0;0;0;0;0;0",
            "01/03/2024;11:00;SLOW;0;0;0;0;0;100",
            "01/03/2024;11:00;FAST;0;0;0;0;0;1000",
            "01/03/2024;11:00;MID;0;0;0;0;0;500",
        ])
        result = load_routing_csv(text)
        window = _window("2024-03-01 08:00", "2024-03-01 11:00")
        report = generate_pph_report(result.series, result.time_index, window, empty_registry)

        pphs = [r.pph for r in report.rows]
        assert pphs == sorted(pphs, reverse=True)
        assert [r.name for r in report.rows] == ["FAST", "MID", "SLOW"]
        assert report.totals.total_increase == sum(r.increase for r in report.rows)
        assert report.totals.total_pph == round(1600 / 3)

    def test_uncoverable_station_excluded_from_rows_and_totals(self, empty_registry):
        text = "\n".join([
            "h;h;h;h;h;h;h;h;h",
            "01/03/2024;08:00;A;0;0;0;0;0;100",
            "01/03/2024;09:00;B;0;0;0;0;0;50",
            "01/03/2024;12:00;B;0;0;0;0;0;999",
        ])
        result = load_routing_csv(text)
        # inverted: B's start resolves to 12:00 and its end to 09:00
        window = _window("2024-03-01 12:00", "2024-03-01 09:00")
        report = generate_pph_report(result.series, result.time_index, window, empty_registry)

        assert not report.window_valid
        assert [r.name for r in report.rows] == ["A"]
        assert report.totals.total_end == 100
        assert report.totals.total_increase == 0
        assert report.net_hours == 0

    def test_narrative_lists(self):
        text = "\n".join([
            "h;h;h;h;h;h;h;h;h",
            "01/03/2024;08:00;A;0;0;0;0;0;0",
            "01/03/2024;08:00;B;0;0;0;0;0;0",
            "01/03/2024;09:00;A;0;0;0;0;0;250",
            "01/03/2024;09:00;B;0;0;0;0;0;80",
        ])
        result = load_routing_csv(text)
        window = _window("2024-03-01 08:00", "2024-03-01 09:00")
        report = generate_pph_report(result.series, result.time_index, window, TargetRegistry())
        assert report.above_target == ("A",)
        assert report.below_target == ("B",)
        assert report.critical == ("B",)

    def test_to_frame(self, dock_csv, empty_registry):
        result = load_routing_csv(dock_csv)
        report = generate_pph_report(result.series, result.time_index, _window(), empty_registry)
        df = report.to_frame()
        assert df.loc[0, "station"] == "DOCK1"
        assert df.loc[0, "status"] == "GOOD"
        assert df.loc[0, "start_volume"] == 50


class TestFormatDuration:

    def test_formats(self):
        assert format_duration(1.5) == "1h30"
        assert format_duration(0) == "0h00"
        assert format_duration(2.9999) == "3h00"


class TestPlanningSnapshot:

    def test_available_dates_and_times(self, planning_csv):
        rows = load_snapshot_csv(planning_csv, PLANNING_COLUMNS)
        assert get_available_dates(rows) == ["02/03/2024", "01/03/2024"]
        assert get_available_times(rows, "01/03/2024") == ["06:00", "10:00"]

    def test_totals_and_shares(self, planning_csv):
        rows = load_snapshot_csv(planning_csv, PLANNING_COLUMNS)
        snap = get_planning_snapshot(rows, "01/03/2024", "06:00")
        assert len(snap["rows"]) == 2
        assert snap["to_route"] == 1500
        assert snap["en_route"] == 1000
        assert snap["transfer"] == 15
        assert snap["received"] == 40
        assert snap["pct_to_route"] == 60
        assert snap["pct_en_route"] == 40

    def test_defaults_to_latest_date_earliest_time(self, planning_csv):
        rows = load_snapshot_csv(planning_csv, PLANNING_COLUMNS)
        snap = get_planning_snapshot(rows)
        assert (snap["date"], snap["time"]) == ("02/03/2024", "06:00")
        assert snap["pct_to_route"] == 25

    def test_unknown_snapshot_is_empty(self, planning_csv):
        rows = load_snapshot_csv(planning_csv, PLANNING_COLUMNS)
        snap = get_planning_snapshot(rows, "09/09/2099", "00:00")
        assert snap["rows"].empty
        assert snap["pct_to_route"] == 0


def _shift(tasks, **kwargs):
    return ShiftData(id=kwargs.pop("id", "s1"), date=kwargs.pop("date", "2024-03-01"),
                     tasks=tasks, **kwargs)


def _task(client, employee, expected, actual):
    return ShiftTask(id=employee, process_type="Recebimento", client_name=client,
                     station="DOCK1", employee=employee,
                     expected_volume=expected, actual_volume=actual)


class TestShiftOverview:

    def test_totals_and_efficiency(self):
        shift = _shift([
            _task("Anjun", "Ana", 100, 90),
            _task("Anjun", "Bia", 100, 120),
            _task("", "Caio", 200, 50),
        ])
        overview = get_shift_overview(shift)
        assert overview["total_expected"] == 400
        assert overview["total_actual"] == 260
        assert overview["efficiency_pct"] == pytest.approx(65.0)

        by_client = overview["by_client"].set_index("client")
        assert by_client.loc["Anjun", "expected"] == 200
        assert by_client.loc["Geral", "actual"] == 50

    def test_top_performers(self):
        shift = _shift([
            _task("X", "Ana", 100, 90),
            _task("X", "Bia", 100, 120),
            _task("X", "Caio", 200, 50),
            _task("X", "Duda", 0, 50),
            _task("X", "Eva", 10, 10),
        ])
        top = get_shift_overview(shift)["top_performers"]
        assert top["employee"].tolist() == ["Bia", "Eva", "Ana"]

    def test_empty_shift(self):
        overview = get_shift_overview(_shift([]))
        assert overview["total_expected"] == 0
        assert overview["efficiency_pct"] == 0
        assert overview["by_client"].empty
        assert overview["top_performers"].empty

    def test_task_completion(self):
        df = get_task_completion(_shift([_task("X", "Ana", 3, 2), _task("X", "Bia", 0, 5)]))
        assert df["completion_pct"].tolist() == [67, 0]

    def test_history_summary(self):
        history = [
            _shift([_task("X", "Ana", 100, 50)], id="s2", supervisor_name="Rita"),
            _shift([], id="s1"),
        ]
        df = get_shift_history_summary(history)
        assert df["id"].tolist() == ["s2", "s1"]
        assert df.loc[0, "efficiency_pct"] == pytest.approx(50.0)
        assert df.loc[1, "efficiency_pct"] == 0
