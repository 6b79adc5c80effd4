"""Data ingestion loaders for station exports and shift records."""

from .routing_csv import load_routing_csv
from .snapshot_csv import load_snapshot_csv, find_columns
from .shift_history import load_shift_history, find_last_shift_with_tasks
from .utils import read_upload_text

__all__ = [
    "load_routing_csv",
    "load_snapshot_csv",
    "find_columns",
    "load_shift_history",
    "find_last_shift_with_tasks",
    "read_upload_text",
]
