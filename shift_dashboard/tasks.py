"""
Shift task generation: turn an export snapshot into planned tasks, and
carry unfinished volume over from the previous shift.
"""

import logging
import uuid

import pandas as pd

from .config import (
    AUTO_TASK_CLIENT,
    AUTO_TASK_EMPLOYEE,
    CARRY_OVER_SUFFIX,
    PROCESS_LOADING,
    PROCESS_RECEIVING,
    PROCESS_ROUTING,
)
from .models import ShiftTask
from .registry import TargetRegistry

logger = logging.getLogger(__name__)


def _task_id(prefix: str, idx: int) -> str:
    return f"{prefix}_{idx}_{uuid.uuid4().hex[:8]}"


def list_snapshots(task_rows: pd.DataFrame) -> list[str]:
    """Distinct "date time" snapshots in a task export, latest string first."""
    if task_rows.empty:
        return []
    return sorted(task_rows["snapshot"].unique().tolist(), reverse=True)


def generate_auto_tasks(
    task_rows: pd.DataFrame,
    snapshot: str,
    registry: TargetRegistry,
) -> list[ShiftTask]:
    """Create one task per process with pending volume at each station.

    Parameters
    ----------
    task_rows : Output of load_snapshot_csv(text, TASK_COLUMNS).
    snapshot : "date time" string, as listed by list_snapshots().
    registry : Station targets; looked up by exact station name.

    Returns
    -------
    Tasks for routing, loading and receiving (unloaded + received), each
    only when its volume is positive.
    """
    if task_rows.empty:
        return []

    relevant = task_rows[task_rows["snapshot"] == snapshot]
    tasks: list[ShiftTask] = []

    for idx, row in enumerate(relevant.itertuples(index=False)):
        target = registry.find(row.station)
        volumes = [
            ("auto_rot", PROCESS_ROUTING, int(row.routing)),
            ("auto_car", PROCESS_LOADING, int(row.loading)),
            ("auto_rec", PROCESS_RECEIVING, int(row.unloaded) + int(row.received)),
        ]
        for prefix, process, volume in volumes:
            if volume <= 0:
                continue
            tasks.append(ShiftTask(
                id=_task_id(prefix, idx),
                process_type=process,
                client_name=AUTO_TASK_CLIENT,
                station=row.station,
                employee=AUTO_TASK_EMPLOYEE,
                expected_volume=volume,
                target_pph=target,
            ))

    if not tasks:
        logger.warning("No pending volume found for snapshot '%s'", snapshot)
    else:
        logger.info("Generated %d tasks from snapshot '%s'", len(tasks), snapshot)
    return tasks


def carry_over_pending(
    previous_tasks: list[ShiftTask],
    current_tasks: list[ShiftTask],
    registry: TargetRegistry,
) -> tuple[list[ShiftTask], int]:
    """Turn the previous shift's unfinished tasks into leftover tasks.

    A task is unfinished when expected volume exceeds actual volume; the
    leftover carries the difference. Leftovers already in the current shift
    (same employee, station and process) are skipped.

    Returns
    -------
    (new_tasks, duplicate_count)
    """
    to_add: list[ShiftTask] = []
    duplicates = 0

    for idx, task in enumerate(previous_tasks):
        if task.expected_volume <= task.actual_volume:
            continue

        employee = task.employee
        if CARRY_OVER_SUFFIX not in employee:
            employee = f"{employee} {CARRY_OVER_SUFFIX}"

        is_duplicate = any(
            t.employee == employee
            and t.station == task.station
            and t.process_type == task.process_type
            for t in current_tasks
        )
        if is_duplicate:
            duplicates += 1
            continue

        to_add.append(ShiftTask(
            id=_task_id("carry", idx),
            process_type=task.process_type,
            client_name=task.client_name,
            station=task.station,
            employee=employee,
            expected_volume=task.expected_volume - task.actual_volume,
            target_pph=registry.find(task.station) or task.target_pph,
        ))

    logger.info("Carried over %d pending tasks (%d duplicates ignored)", len(to_add), duplicates)
    return to_add, duplicates
