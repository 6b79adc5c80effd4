"""
Loader for shift records exported by the sync service.

Source: shift_history.json, a list of shift objects (camelCase keys), or
an object with a "history" list, newest last as stored by the sheet.

Numeric fields may arrive as strings or be missing; they coerce to 0.
"""

import json
import logging
from pathlib import Path
from typing import Any

from ..models import ShiftData, ShiftTask

logger = logging.getLogger(__name__)


def _to_int(val: Any) -> int:
    try:
        number = float(val)
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return int(number)


def _to_optional_int(val: Any) -> int | None:
    if val in (None, ""):
        return None
    return _to_int(val) or None


def parse_task(raw: dict) -> ShiftTask:
    return ShiftTask(
        id=str(raw.get("id", "")),
        process_type=str(raw.get("processType", "")),
        client_name=str(raw.get("clientName", "")),
        station=str(raw.get("station", "")),
        employee=str(raw.get("employee", "")),
        expected_volume=_to_int(raw.get("expectedVolume")),
        actual_volume=_to_int(raw.get("actualVolume")),
        start_time=str(raw.get("startTime", "")),
        end_time=str(raw.get("endTime", "")),
        target_pph=_to_optional_int(raw.get("targetPPH")),
    )


def parse_shift(raw: dict) -> ShiftData:
    tasks = raw.get("tasks")
    if isinstance(tasks, str):
        # the sheet stores tasks as a JSON string column
        try:
            tasks = json.loads(tasks)
        except json.JSONDecodeError:
            logger.warning("Unreadable task list in shift %s", raw.get("id"))
            tasks = []
    if not isinstance(tasks, list):
        tasks = []

    return ShiftData(
        id=str(raw.get("id", "")),
        date=str(raw.get("date", "")),
        supervisor_name=str(raw.get("supervisorName", "")),
        shift=str(raw.get("shift", "")),
        global_start_time=str(raw.get("globalStartTime", "")),
        global_end_time=str(raw.get("globalEndTime", "")),
        tasks=[parse_task(t) for t in tasks if isinstance(t, dict)],
        lunch_start_time=str(raw.get("lunchStartTime", "")),
        lunch_end_time=str(raw.get("lunchEndTime", "")),
        safety_incident=bool(raw.get("safetyIncident", False)),
        five_s_status=str(raw.get("fiveSStatus", "Bom")),
        missing_employees_count=_to_int(raw.get("missingEmployeesCount")),
        general_notes=str(raw.get("generalNotes", "")),
    )


def load_shift_history(path: str | Path) -> list[ShiftData]:
    """Load shift records, newest first.

    Returns
    -------
    List of ShiftData. Entries that are not objects are dropped.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except Exception:
        logger.exception("Failed to read shift history: %s", path)
        raise

    if isinstance(raw, dict):
        raw = raw.get("history", [])
    if not isinstance(raw, list):
        logger.warning("Shift history %s has no record list", path)
        return []

    shifts = [parse_shift(r) for r in reversed(raw) if isinstance(r, dict)]
    logger.info("Loaded %d shift records from %s", len(shifts), path)
    return shifts


def find_last_shift_with_tasks(
    history: list[ShiftData],
    exclude_id: str = "",
) -> ShiftData | None:
    """Most recent shift that has tasks, skipping the shift being edited."""
    for shift in history:
        if shift.id and shift.id == exclude_id:
            continue
        if shift.tasks:
            return shift
    return None
