"""
Shared utilities for export ingestion: line splitting, separator detection,
header normalisation, date and number parsing.
"""

import io
import logging
import math
import re
import unicodedata
from datetime import datetime, time
from typing import Any

import openpyxl
import pandas as pd

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def split_lines(text: str) -> list[str]:
    """Return the trimmed, non-empty lines of `text`."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def detect_separator(header: str) -> str:
    """';' if the header line contains one, else ','."""
    return ";" if ";" in header else ","


def split_fields(line: str, separator: str) -> list[str]:
    return [field.strip() for field in line.split(separator)]


def normalise_header(name: str) -> str:
    """Uppercase, strip diacritics and collapse whitespace.

    "Estação  de destino" -> "ESTACAO DE DESTINO"
    """
    s = unicodedata.normalize("NFD", str(name).upper())
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def parse_int(val: Any) -> int:
    """Parse the leading integer of a field; anything else is 0.

    "350" -> 350, "12abc" -> 12, "1.234" -> 1, "abc" -> 0
    """
    if val is None:
        return 0
    match = _LEADING_INT.match(str(val))
    if not match:
        return 0
    return int(match.group(1))


def parse_br_number(val: Any) -> int:
    """Parse a Brazilian-format number and floor it to an int.

    "." is a thousands separator and "," the decimal separator:
    "1.234,9" -> 1234. Non-numeric values are 0.
    """
    if val is None:
        return 0
    s = str(val).replace(".", "").replace(",", ".", 1)
    match = _LEADING_FLOAT.match(s)
    if not match:
        return 0
    try:
        number = float(match.group(1))
    except ValueError:
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return math.floor(number)


def _parse_clock(time_str: str) -> tuple[int, int] | None:
    parts = time_str.split(":")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def _leading_int(val: str) -> int | None:
    match = _LEADING_INT.match(val)
    return int(match.group(1)) if match else None


def parse_date_time(date_str: str, time_str: str) -> pd.Timestamp | None:
    """Build a local timestamp from a date field and an HH:MM time field.

    Accepts DD/MM/YYYY or DD/MM/YY (two-digit years are 2000+YY); each
    part is read as a leading integer, so "01/03/2024 08:00" still gives
    2024. A date without "/" must start with YYYY-MM-DD; it is joined to
    the time as "<date>T<time>" and parsed as an ISO date-time. An explicit
    UTC offset is converted to the machine's local time. Returns None for
    anything unparseable.
    """
    if "/" in date_str:
        parts = date_str.split("/")
        if len(parts) < 3:
            return None
        clock = _parse_clock(time_str)
        if clock is None:
            return None
        day, month, year = (_leading_int(p) for p in parts[:3])
        if day is None or month is None or year is None:
            return None
        if year < 100:
            year += 2000
        try:
            return pd.Timestamp(
                year=year, month=month, day=day, hour=clock[0], minute=clock[1]
            )
        except (ValueError, OverflowError):
            return None

    if not _ISO_DATE.match(date_str):
        return None
    try:
        ts = pd.Timestamp(f"{date_str}T{time_str}")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = pd.Timestamp(ts.to_pydatetime().astimezone().replace(tzinfo=None))
    return ts


def format_label(ts: pd.Timestamp) -> str:
    """Display label for a time point, e.g. '01/03 - 08:00'."""
    return ts.strftime("%d/%m - %H:%M")


# ---------------------------------------------------------------------------
# Uploaded files
# ---------------------------------------------------------------------------

def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        # the time of day lives in its own column
        return value.strftime("%d/%m/%Y")
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value).replace(".", ",")
    return str(value).replace(";", ",")


def read_upload_text(data: bytes, filename: str = "") -> str:
    """Decode an uploaded export into delimited text.

    Excel workbooks (.xlsx) are flattened from their first sheet into
    ';'-separated lines; anything else is decoded as UTF-8.
    """
    if filename.lower().endswith(".xlsx"):
        try:
            wb = openpyxl.load_workbook(io.BytesIO(data), data_only=True, read_only=True)
        except Exception:
            logger.exception("Failed to open workbook: %s", filename)
            raise
        ws = wb.worksheets[0]
        lines = []
        for row in ws.iter_rows(values_only=True):
            cells = [_cell_text(v) for v in row]
            if any(cells):
                lines.append(";".join(cells))
        wb.close()
        logger.info("Flattened %d rows from workbook %s", len(lines), filename)
        return "\n".join(lines)

    return data.decode("utf-8-sig", errors="replace")
