"""
Shift Floor Dashboard: interactive Streamlit front end

Run with:  streamlit run app.py
"""

import sys
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent))

from shift_dashboard.config import (
    REGISTRY_FILE,
    SHIFT_HISTORY_FILE,
    TASK_COLUMNS,
    PLANNING_COLUMNS,
)
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
from shift_dashboard.exceptions import IngestError
from shift_dashboard.loaders import (
    find_last_shift_with_tasks,
    load_routing_csv,
    load_shift_history,
    load_snapshot_csv,
    read_upload_text,
)
from shift_dashboard.models import SelectionWindow
from shift_dashboard.registry import TargetRegistry, load_registry
from shift_dashboard.simulator import (
    generate_registry_records,
    generate_routing_csv,
    generate_snapshot_csv,
)
from shift_dashboard.tasks import carry_over_pending, generate_auto_tasks, list_snapshots

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Shift Floor Dashboard",
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="expanded",
)

STATUS_COLORS = {
    "TOP": "#f1c40f",
    "OPTIMAL": "#2ecc71",
    "GOOD": "#3498db",
    "MEDIUM": "#9b59b6",
    "LOW": "#e74c3c",
}


# ---------------------------------------------------------------------------
# Data loading (cached)
# ---------------------------------------------------------------------------
@st.cache_data
def load_registry_cached():
    if REGISTRY_FILE.exists():
        return load_registry(REGISTRY_FILE)
    return TargetRegistry.from_records(generate_registry_records())


@st.cache_data
def load_history_cached():
    if SHIFT_HISTORY_FILE.exists():
        return load_shift_history(SHIFT_HISTORY_FILE)
    return []


@st.cache_data
def simulated_routing_csv():
    return generate_routing_csv()


@st.cache_data
def simulated_snapshot_csv():
    return generate_snapshot_csv()


@st.cache_data
def ingest_routing(text: str):
    return load_routing_csv(text)


@st.cache_data
def ingest_snapshot(text: str, columns: dict):
    return load_snapshot_csv(text, columns)


def uploaded_text(label: str, key: str) -> str | None:
    upload = st.file_uploader(label, type=["csv", "txt", "xlsx"], key=key)
    if upload is None:
        return None
    return read_upload_text(upload.getvalue(), upload.name)


registry = load_registry_cached()

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("Shift Floor Dashboard")
st.sidebar.markdown("Throughput & shift reporting")
st.sidebar.divider()

page = st.sidebar.radio(
    "Navigate",
    ["PPH Report", "Planning Snapshot", "Auto Tasks", "Shift Overview"],
)

st.sidebar.divider()
st.sidebar.caption(f"{len(registry)} stations with registered targets")


# ---------------------------------------------------------------------------
# Helper: status badge
# ---------------------------------------------------------------------------
def color_status(val):
    color = STATUS_COLORS.get(val, "#95a5a6")
    return f"background-color: {color}22; color: {color}; font-weight: 700"


# ===========================================================================
# PAGE: PPH Report
# ===========================================================================
if page == "PPH Report":
    st.title("Real PPH Report")

    text = uploaded_text("Routing export", "routing_upload")
    if text is None:
        st.info("No file selected, showing simulated data.")
        text = simulated_routing_csv()

    try:
        result = ingest_routing(text)
    except IngestError as e:
        st.error(str(e))
        st.stop()

    if result.rows_skipped:
        st.caption(f"{result.rows_skipped} of {result.rows_read} rows skipped as malformed")

    options = result.time_index.options()
    labels = [label for _, label in options]
    default_start, default_end = 0, len(options) - 1

    col1, col2 = st.columns(2)
    with col1:
        start_idx = st.selectbox("Start", range(len(options)), index=default_start,
                                 format_func=lambda i: labels[i])
    with col2:
        end_idx = st.selectbox("End", range(len(options)), index=default_end,
                               format_func=lambda i: labels[i])

    has_break = st.checkbox("Discount break")
    break_start, break_end = "", ""
    if has_break:
        b1, b2 = st.columns(2)
        with b1:
            break_start = st.text_input("Break start (HH:MM)", "")
        with b2:
            break_end = st.text_input("Break end (HH:MM)", "")

    window = SelectionWindow(
        start=options[start_idx][0],
        end=options[end_idx][0],
        break_enabled=has_break,
        break_start=break_start,
        break_end=break_end,
    )
    report = generate_pph_report(result.series, result.time_index, window, registry)

    if not report.window_valid:
        st.warning("Invalid window: start must be before end.")

    m1, m2, m3 = st.columns(3)
    with m1:
        st.metric("Net time", format_duration(report.net_hours))
    with m2:
        st.metric("Overall PPH", report.totals.total_pph)
    with m3:
        st.metric("Average target", f"{report.totals.avg_target:.0f}")

    table = report.to_frame()
    if table.empty:
        st.warning("No station has data for this window.")
    else:
        styled = table[["station", "target", "pph", "status", "start_volume", "end_volume", "increase"]] \
            .style.map(color_status, subset=["status"])
        st.dataframe(styled, use_container_width=True, hide_index=True)

        fig = go.Figure(go.Bar(
            x=table["station"],
            y=table["pph"],
            marker_color=[STATUS_COLORS.get(s, "#95a5a6") for s in table["status"]],
            name="PPH",
        ))
        fig.add_trace(go.Scatter(
            x=table["station"],
            y=table["target"],
            name="Target",
            mode="markers",
            marker=dict(color="#2c3e50", size=12, symbol="line-ew-open"),
        ))
        fig.update_layout(
            height=400,
            yaxis_title="PPH",
            plot_bgcolor="rgba(0,0,0,0)",
            margin=dict(l=10, r=10, t=10, b=40),
        )
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("Target analysis")
    st.markdown(f"**Above target ({len(report.above_target)}):** {', '.join(report.above_target) or 'None'}.")
    st.markdown(f"**Below target ({len(report.below_target)}):** {', '.join(report.below_target) or 'None'}.")
    if report.critical:
        st.error(f"Critical (<50%): {', '.join(report.critical)}.")


# ===========================================================================
# PAGE: Planning Snapshot
# ===========================================================================
elif page == "Planning Snapshot":
    st.title("Snapshot: Operational Analysis")

    text = uploaded_text("Station status export", "planning_upload")
    if text is None:
        st.info("No file selected, showing simulated data.")
        text = simulated_snapshot_csv()

    try:
        rows = ingest_snapshot(text, PLANNING_COLUMNS)
    except IngestError as e:
        st.error(str(e))
        st.stop()

    st.caption(f"{len(rows)} records loaded")

    dates = get_available_dates(rows)
    col1, col2 = st.columns(2)
    with col1:
        date = st.selectbox("Date", dates)
    with col2:
        time = st.selectbox("Time", get_available_times(rows, date))

    snap = get_planning_snapshot(rows, date, time)

    m1, m2, m3, m4 = st.columns(4)
    with m1:
        st.metric("To route", f"{snap['to_route']:,}", f"{snap['pct_to_route']}%", delta_color="off")
    with m2:
        st.metric("En route", f"{snap['en_route']:,}", f"{snap['pct_en_route']}%", delta_color="off")
    with m3:
        st.metric("Transfers", f"{snap['transfer']:,}")
    with m4:
        st.metric("Received", f"{snap['received']:,}")

    if snap["rows"].empty:
        st.warning("No rows for this snapshot.")
    else:
        st.dataframe(
            snap["rows"][["station", "transfer", "shipment_received", "unloaded", "to_route", "en_route"]],
            use_container_width=True,
            hide_index=True,
        )


# ===========================================================================
# PAGE: Auto Tasks
# ===========================================================================
elif page == "Auto Tasks":
    st.title("Generate Tasks from Export")

    text = uploaded_text("Station status export", "task_upload")
    if text is None:
        st.info("No file selected, showing simulated data.")
        text = simulated_snapshot_csv()

    try:
        task_rows = ingest_snapshot(text, TASK_COLUMNS)
    except IngestError as e:
        st.error(str(e))
        st.stop()

    snapshots = list_snapshots(task_rows)
    if not snapshots:
        st.warning("The export has no usable rows.")
        st.stop()

    snapshot = st.selectbox("Status time", snapshots)
    tasks = generate_auto_tasks(task_rows, snapshot, registry)

    if tasks:
        st.success(f"{len(tasks)} tasks generated")
        st.dataframe(pd.DataFrame([t.to_dict() for t in tasks]), use_container_width=True, hide_index=True)
    else:
        st.warning("No volume found for this time.")

    st.divider()
    st.subheader("Leftovers from previous shift")
    history = load_history_cached()
    previous = find_last_shift_with_tasks(history)
    if previous is None:
        st.caption("No previous shift with tasks found.")
    else:
        leftovers, duplicates = carry_over_pending(previous.tasks, tasks, registry)
        if leftovers:
            st.dataframe(pd.DataFrame([t.to_dict() for t in leftovers]), use_container_width=True, hide_index=True)
        else:
            st.caption("Previous shift has no pending volume.")
        if duplicates:
            st.caption(f"{duplicates} leftovers already in the current list")


# ===========================================================================
# PAGE: Shift Overview
# ===========================================================================
elif page == "Shift Overview":
    st.title("Shift Performance")

    history = load_history_cached()
    if not history:
        st.warning("No shift history available.")
        st.stop()

    latest = history[0]
    overview = get_shift_overview(latest)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Planned volume", f"{overview['total_expected']:,}")
    with col2:
        st.metric("Actual volume", f"{overview['total_actual']:,}")
    with col3:
        st.metric("Efficiency", f"{overview['efficiency_pct']:.0f}%")

    by_client = overview["by_client"]
    if not by_client.empty:
        st.subheader("By client")
        fig = go.Figure()
        fig.add_trace(go.Bar(x=by_client["client"], y=by_client["expected"], name="Planned", marker_color="#bdc3c7"))
        fig.add_trace(go.Bar(x=by_client["client"], y=by_client["actual"], name="Actual", marker_color="#3498db"))
        fig.update_layout(barmode="group", height=350, plot_bgcolor="rgba(0,0,0,0)")
        st.plotly_chart(fig, use_container_width=True)

    if not overview["top_performers"].empty:
        st.subheader("Top performers")
        st.dataframe(overview["top_performers"], use_container_width=True, hide_index=True)

    st.subheader("Shift handover")
    st.dataframe(get_task_completion(latest), use_container_width=True, hide_index=True)

    st.subheader("Recent shifts")
    st.dataframe(get_shift_history_summary(history), use_container_width=True, hide_index=True)
