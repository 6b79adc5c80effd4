"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end and the
pipeline runner. Each function returns plain dataclasses, dicts or
DataFrames; formatting is left to the caller.
"""

import logging

import pandas as pd

from .config import DEFAULT_CLIENT_GROUP, HISTORY_LIMIT, TOP_PERFORMERS
from .kpis import build_station_report, calc_totals, round_half_up, sort_by_pph, split_by_target
from .models import PPHReport, SelectionWindow, ShiftData, StationSeries, TimeIndex
from .registry import TargetRegistry
from .transforms import calc_net_hours, resolve_window

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# PPH report
# ---------------------------------------------------------------------------

def generate_pph_report(
    series: StationSeries,
    time_index: TimeIndex,
    window: SelectionWindow,
    registry: TargetRegistry,
) -> PPHReport:
    """Compute per-station and overall PPH for a selection window.

    Parameters
    ----------
    series : Station observations from load_routing_csv().
    time_index : Selectable instants, used for the boundary labels.
    window : Start/end instants and optional break interval.
    registry : Station targets (default target when unregistered).

    Returns
    -------
    PPHReport with rows sorted by PPH (highest first), totals, boundary
    labels, net hours and the above/below/critical station lists.

    An inverted or empty window is logged and still computed.
    """
    window_valid = window.is_valid
    if not window_valid:
        logger.warning(
            "Invalid window: start %s is not before end %s", window.start, window.end
        )

    net_hours = calc_net_hours(window)
    rows = []

    for name, records in series.items():
        if not records:
            continue
        resolved = resolve_window(records, window)
        if resolved is None:
            logger.debug("Station %s has no coverage for the window, excluded", name)
            continue
        start, end = resolved
        rows.append(build_station_report(
            name, start, end, net_hours, registry.target_for(name)
        ))

    rows = sort_by_pph(rows)
    above, below, critical = split_by_target(rows)

    logger.info(
        "Built PPH report: %d stations over %.2f net hours", len(rows), net_hours
    )
    return PPHReport(
        rows=tuple(rows),
        totals=calc_totals(rows, net_hours),
        start_label=time_index.label_for(window.start),
        end_label=time_index.label_for(window.end),
        net_hours=net_hours,
        window_valid=window_valid,
        above_target=tuple(above),
        below_target=tuple(below),
        critical=tuple(critical),
    )


def format_duration(hours: float) -> str:
    """1.5 -> '1h30'."""
    h = int(hours)
    m = round_half_up((hours - h) * 60)
    if m == 60:
        h, m = h + 1, 0
    return f"{h}h{m:02d}"


# ---------------------------------------------------------------------------
# Planning snapshot
# ---------------------------------------------------------------------------

def get_available_dates(snapshot_rows: pd.DataFrame) -> list[str]:
    """Distinct dates for UI dropdowns, latest string first."""
    if snapshot_rows.empty:
        return []
    return sorted(snapshot_rows["date"].unique().tolist(), reverse=True)


def get_available_times(snapshot_rows: pd.DataFrame, date: str) -> list[str]:
    """Distinct times recorded on `date`, ascending."""
    if snapshot_rows.empty or not date:
        return []
    return sorted(snapshot_rows.loc[snapshot_rows["date"] == date, "time"].unique().tolist())


def get_planning_snapshot(
    snapshot_rows: pd.DataFrame,
    date: str | None = None,
    time: str | None = None,
) -> dict:
    """Station rows and volume totals for one export snapshot.

    Parameters
    ----------
    snapshot_rows : Output of load_snapshot_csv(text, PLANNING_COLUMNS).
    date, time : Snapshot to show. Defaults to the latest date and its
        earliest time.

    Returns
    -------
    Dict with structure:
    {
        "date": "02/03/2024", "time": "06:00",
        "rows": DataFrame,
        "to_route": ..., "en_route": ..., "transfer": ..., "received": ...,
        "pct_to_route": 62, "pct_en_route": 38,
    }
    """
    if date is None:
        dates = get_available_dates(snapshot_rows)
        date = dates[0] if dates else ""
    if time is None:
        times = get_available_times(snapshot_rows, date)
        time = times[0] if times else ""

    if snapshot_rows.empty:
        rows = snapshot_rows
    else:
        rows = snapshot_rows[
            (snapshot_rows["date"] == date) & (snapshot_rows["time"] == time)
        ].reset_index(drop=True)

    def _total(col: str) -> int:
        return int(rows[col].sum()) if col in rows.columns and not rows.empty else 0

    to_route = _total("to_route")
    en_route = _total("en_route")
    in_house = to_route + en_route

    return {
        "date": date,
        "time": time,
        "rows": rows,
        "to_route": to_route,
        "en_route": en_route,
        "transfer": _total("transfer"),
        "received": _total("received"),
        "pct_to_route": round_half_up(to_route / in_house * 100) if in_house > 0 else 0,
        "pct_en_route": round_half_up(en_route / in_house * 100) if in_house > 0 else 0,
    }


# ---------------------------------------------------------------------------
# Shift performance
# ---------------------------------------------------------------------------

def _efficiency(actual: float, expected: float) -> float:
    return actual / expected * 100 if expected > 0 else 0.0


def get_task_completion(shift: ShiftData) -> pd.DataFrame:
    """Per-task completion for the shift handover card.

    Returns
    -------
    DataFrame with columns:
        process_type, station, employee, expected_volume, actual_volume,
        completion_pct
    """
    columns = [
        "process_type", "station", "employee",
        "expected_volume", "actual_volume", "completion_pct",
    ]
    records = [
        {
            "process_type": t.process_type,
            "station": t.station,
            "employee": t.employee,
            "expected_volume": t.expected_volume,
            "actual_volume": t.actual_volume,
            "completion_pct": round_half_up(_efficiency(t.actual_volume, t.expected_volume)),
        }
        for t in shift.tasks
    ]
    return pd.DataFrame(records, columns=columns)


def get_shift_overview(shift: ShiftData) -> dict:
    """Planned vs. actual summary of one shift.

    Returns
    -------
    Dict with structure:
    {
        "total_expected": ..., "total_actual": ..., "efficiency_pct": ...,
        "by_client": DataFrame(client, expected, actual, efficiency_pct),
        "top_performers": DataFrame(employee, station, process_type,
                                    expected_volume, actual_volume, efficiency_pct),
    }
    """
    tasks = pd.DataFrame(
        [t.to_dict() for t in shift.tasks],
        columns=["client_name", "employee", "station", "process_type",
                 "expected_volume", "actual_volume"],
    )

    total_expected = int(tasks["expected_volume"].sum()) if not tasks.empty else 0
    total_actual = int(tasks["actual_volume"].sum()) if not tasks.empty else 0

    if tasks.empty:
        by_client = pd.DataFrame(columns=["client", "expected", "actual", "efficiency_pct"])
        top = pd.DataFrame(columns=[
            "employee", "station", "process_type",
            "expected_volume", "actual_volume", "efficiency_pct",
        ])
    else:
        tasks["client"] = tasks["client_name"].replace("", DEFAULT_CLIENT_GROUP)
        by_client = (
            tasks.groupby("client", sort=False)
            .agg(expected=("expected_volume", "sum"), actual=("actual_volume", "sum"))
            .reset_index()
        )
        by_client["efficiency_pct"] = [
            _efficiency(a, e) for a, e in zip(by_client["actual"], by_client["expected"])
        ]

        ranked = tasks[tasks["expected_volume"] > 0].copy()
        ranked["efficiency_pct"] = ranked["actual_volume"] / ranked["expected_volume"] * 100
        top = (
            ranked.sort_values("efficiency_pct", ascending=False, kind="stable")
            .head(TOP_PERFORMERS)
            [["employee", "station", "process_type",
              "expected_volume", "actual_volume", "efficiency_pct"]]
            .reset_index(drop=True)
        )

    return {
        "total_expected": total_expected,
        "total_actual": total_actual,
        "efficiency_pct": _efficiency(total_actual, total_expected),
        "by_client": by_client,
        "top_performers": top,
    }


def get_shift_history_summary(history: list[ShiftData]) -> pd.DataFrame:
    """One row per recent shift with its overall efficiency.

    Returns
    -------
    DataFrame with columns:
        id, date, supervisor, shift, total_expected, total_actual, efficiency_pct
    """
    columns = [
        "id", "date", "supervisor", "shift",
        "total_expected", "total_actual", "efficiency_pct",
    ]
    rows = []
    for shift in history[:HISTORY_LIMIT]:
        expected = sum(t.expected_volume for t in shift.tasks)
        actual = sum(t.actual_volume for t in shift.tasks)
        rows.append({
            "id": shift.id,
            "date": shift.date,
            "supervisor": shift.supervisor_name,
            "shift": shift.shift,
            "total_expected": expected,
            "total_actual": actual,
            "efficiency_pct": _efficiency(actual, expected),
        })
    return pd.DataFrame(rows, columns=columns)
