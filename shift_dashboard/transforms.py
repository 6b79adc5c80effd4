"""
Time-series transforms: build the time index of selectable instants and
resolve a selection window against each station's observations.
"""

import logging
from bisect import bisect_right

import pandas as pd

from .models import Observation, SelectionWindow, TimeIndex

logger = logging.getLogger(__name__)

_MINUTES_PER_DAY = 24 * 60


def build_time_index(labels: dict[pd.Timestamp, str]) -> TimeIndex:
    """Sort the distinct instants collected during ingestion.

    Parameters
    ----------
    labels : instant -> display label, one entry per distinct instant.

    Returns
    -------
    TimeIndex ordered ascending; the first and last entries are the
    default window boundaries.
    """
    ordered = sorted(labels.items(), key=lambda item: item[0])
    return TimeIndex(
        instants=tuple(ts for ts, _ in ordered),
        labels=tuple(label for _, label in ordered),
    )


def resolve_observation(
    records: tuple[Observation, ...],
    target: pd.Timestamp,
) -> Observation:
    """Pick the observation that stands for a station's value at `target`.

    Rules
    -----
    - an observation exactly at `target` wins
    - otherwise the latest observation before `target` (carry forward)
    - otherwise the station's first observation, even if it is later

    `records` must be non-empty and sorted ascending by timestamp.
    """
    timestamps = [r.timestamp for r in records]
    pos = bisect_right(timestamps, target)
    if pos == 0:
        return records[0]
    return records[pos - 1]


def resolve_window(
    records: tuple[Observation, ...],
    window: SelectionWindow,
) -> tuple[Observation, Observation] | None:
    """Resolve both window boundaries for one station.

    Returns None when the resolved start lies after the resolved end, in
    which case the station has no usable coverage for the window.
    """
    start = resolve_observation(records, window.start)
    end = resolve_observation(records, window.end)
    if start.timestamp > end.timestamp:
        return None
    return start, end


def _clock_minutes(val: str) -> int | None:
    parts = val.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0]) * 60 + int(parts[1])
    except ValueError:
        return None


def calc_break_hours(start: str, end: str) -> float:
    """Duration of a break given as two HH:MM times of day.

    A break ending before it starts wraps past midnight:
    ("23:30", "00:15") -> 0.75. Missing or unparseable times give 0.
    """
    if not start or not end:
        return 0.0
    m1 = _clock_minutes(start)
    m2 = _clock_minutes(end)
    if m1 is None or m2 is None:
        logger.warning("Ignoring unparseable break interval %r-%r", start, end)
        return 0.0
    minutes = m2 - m1
    if minutes < 0:
        minutes += _MINUTES_PER_DAY
    return minutes / 60


def calc_hours_between(start: pd.Timestamp, end: pd.Timestamp) -> float:
    """Elapsed hours from start to end, never negative."""
    return max(0.0, (end - start).total_seconds() / 3600)


def calc_net_hours(window: SelectionWindow) -> float:
    """Window length in hours minus the break, when break accounting is on."""
    hours = calc_hours_between(window.start, window.end)
    if window.break_enabled and window.break_start and window.break_end:
        hours = max(0.0, hours - calc_break_hours(window.break_start, window.break_end))
    return hours
