"""
Loader for header-matched station status exports.

Used by the planning snapshot view and the auto-task generator. Unlike the
routing loader, column positions are not fixed: each column is located by
matching keywords against the normalised header line, and every metric is
kept as its own column.

Numbers use the Brazilian format ("1.234,5"), floored to integers.
"""

import logging

import pandas as pd

from ..config import ESSENTIAL_COLUMNS, PLANNING_COLUMNS
from ..exceptions import EmptyFileError, MissingColumnsError
from .utils import detect_separator, normalise_header, parse_br_number, split_fields, split_lines

logger = logging.getLogger(__name__)


def find_columns(
    headers: list[str],
    columns: dict[str, tuple[str, ...]],
) -> dict[str, int | None]:
    """Map each column name to the first header containing one of its keywords.

    `headers` must already be normalised. Unmatched columns map to None.
    """
    positions: dict[str, int | None] = {}
    for name, keywords in columns.items():
        positions[name] = next(
            (i for i, h in enumerate(headers) if any(k in h for k in keywords)),
            None,
        )
    return positions


def load_snapshot_csv(
    text: str,
    columns: dict[str, tuple[str, ...]] = PLANNING_COLUMNS,
) -> pd.DataFrame:
    """Parse a header-matched export into one row per station snapshot.

    Parameters
    ----------
    text : Raw file content.
    columns : Column name -> header keywords. Must include the essential
        date, time and station columns; everything else is a metric.

    Returns
    -------
    DataFrame with columns:
        date, time, station, snapshot, <one int column per metric>

    Raises
    ------
    EmptyFileError if there is no header plus at least one data line.
    MissingColumnsError if date, time or station cannot be matched.
    """
    lines = split_lines(text)
    if len(lines) < 2:
        raise EmptyFileError("The file has no data rows.")

    header_line = lines[0].lstrip("\ufeff")
    separator = detect_separator(header_line)
    headers = [normalise_header(h) for h in header_line.split(separator)]

    positions = find_columns(headers, columns)
    missing = [c for c in ESSENTIAL_COLUMNS if positions.get(c) is None]
    if missing:
        raise MissingColumnsError(missing)

    metrics = [c for c in columns if c not in ESSENTIAL_COLUMNS]
    rows = []
    skipped = 0

    for line in lines[1:]:
        fields = split_fields(line, separator)
        if len(fields) < len(headers):
            skipped += 1
            continue

        date = fields[positions["date"]]
        time = fields[positions["time"]]
        station = fields[positions["station"]]
        if not (date and time and station):
            skipped += 1
            continue

        record = {
            "date": date,
            "time": time,
            "station": station,
            "snapshot": f"{date} {time}",
        }
        for metric in metrics:
            idx = positions[metric]
            record[metric] = parse_br_number(fields[idx]) if idx is not None else 0
        rows.append(record)

    df = pd.DataFrame(rows, columns=["date", "time", "station", "snapshot", *metrics])
    if not df.empty:
        df[metrics] = df[metrics].astype(int)

    absent = [m for m in metrics if positions[m] is None]
    if absent:
        logger.warning("Metric columns not found, defaulting to 0: %s", ", ".join(absent))
    logger.info("Loaded %d snapshot rows (%d skipped)", len(df), skipped)
    return df
