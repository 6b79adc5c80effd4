"""
Loader for the fixed-position routing export used by the PPH report.

Source: station status export (CSV, ';' or ',' separated)

Structure:
    Line 1: header, only consulted to detect the separator
    Col 0: date (DD/MM/YYYY, DD/MM/YY or ISO date)
    Col 1: time (HH:MM)
    Col 2: station name
    Col 8: cumulative volume processed by the station

Rows that are short, lack a time or carry an unparseable date are skipped;
the count is reported on the IngestResult.
"""

import logging

import pandas as pd

from ..config import COL_DATE, COL_STATION, COL_TIME, COL_VOLUME, MIN_COLUMNS, MIN_TIME_POINTS
from ..exceptions import EmptyFileError, InsufficientTimePointsError
from ..models import IngestResult, Observation
from ..transforms import build_time_index
from .utils import detect_separator, format_label, parse_date_time, parse_int, split_fields, split_lines

logger = logging.getLogger(__name__)


def _parse_row(fields: list[str]) -> Observation | None:
    if len(fields) < MIN_COLUMNS:
        return None
    time_str = fields[COL_TIME]
    if ":" not in time_str:
        return None
    ts = parse_date_time(fields[COL_DATE], time_str)
    if ts is None:
        return None
    return Observation(
        station=fields[COL_STATION],
        timestamp=ts,
        label=format_label(ts),
        volume=parse_int(fields[COL_VOLUME]),
    )


def load_routing_csv(text: str) -> IngestResult:
    """Parse a routing export into per-station volume series.

    Parameters
    ----------
    text : Raw content of the uploaded file.

    Returns
    -------
    IngestResult with the station series (sorted by time), the time index
    of every distinct instant, and read/skipped row counts.

    Raises
    ------
    EmptyFileError if the text has no lines at all.
    InsufficientTimePointsError if fewer than two distinct instants parse.
    """
    lines = split_lines(text)
    if not lines:
        raise EmptyFileError("The file is empty.")

    separator = detect_separator(lines[0])
    data_rows = lines[1:]

    stations: dict[str, list[Observation]] = {}
    labels: dict[pd.Timestamp, str] = {}
    skipped = 0

    for line_no, row in enumerate(data_rows, start=2):
        obs = _parse_row(split_fields(row, separator))
        if obs is None:
            skipped += 1
            logger.debug("Skipping malformed row %d: %r", line_no, row)
            continue
        stations.setdefault(obs.station, []).append(obs)
        labels.setdefault(obs.timestamp, obs.label)

    if len(labels) < MIN_TIME_POINTS:
        raise InsufficientTimePointsError(
            "The file needs at least two distinct time points."
        )

    series = {
        name: tuple(sorted(records, key=lambda o: o.timestamp))
        for name, records in stations.items()
    }
    time_index = build_time_index(labels)

    logger.info(
        "Loaded %d observations for %d stations across %d time points (%d rows skipped)",
        len(data_rows) - skipped, len(series), len(time_index), skipped,
    )
    return IngestResult(
        series=series,
        time_index=time_index,
        rows_read=len(data_rows),
        rows_skipped=skipped,
    )
