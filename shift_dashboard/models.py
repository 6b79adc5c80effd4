"""
Record types shared by the loaders, transforms and report builders.

Observations and report rows are frozen dataclasses; a report is rebuilt
from scratch whenever the window changes, never patched in place.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum

import pandas as pd


class Status(str, Enum):
    TOP = "TOP"
    OPTIMAL = "OPTIMAL"
    GOOD = "GOOD"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class Observation:
    """One parsed row of a routing export: a station's volume at an instant."""

    station: str
    timestamp: pd.Timestamp
    label: str
    volume: int


# station name (exact, case-sensitive) -> observations sorted by timestamp
StationSeries = dict[str, tuple[Observation, ...]]


@dataclass(frozen=True)
class TimeIndex:
    """Distinct instants across all stations, ascending, with display labels."""

    instants: tuple[pd.Timestamp, ...]
    labels: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.instants)

    def default_window(self) -> tuple[pd.Timestamp, pd.Timestamp]:
        """Earliest and latest instants."""
        return self.instants[0], self.instants[-1]

    def label_for(self, instant: pd.Timestamp) -> str:
        try:
            return self.labels[self.instants.index(instant)]
        except ValueError:
            return ""

    def options(self) -> list[tuple[pd.Timestamp, str]]:
        return list(zip(self.instants, self.labels))


@dataclass(frozen=True)
class SelectionWindow:
    start: pd.Timestamp
    end: pd.Timestamp
    break_enabled: bool = False
    break_start: str = ""
    break_end: str = ""

    @property
    def is_valid(self) -> bool:
        return self.start < self.end


@dataclass(frozen=True)
class IngestResult:
    series: StationSeries
    time_index: TimeIndex
    rows_read: int
    rows_skipped: int


@dataclass(frozen=True)
class StationReport:
    name: str
    start: Observation
    end: Observation
    increase: int
    net_hours: float
    pph: int
    target: int
    status: Status


@dataclass(frozen=True)
class AggregateTotals:
    total_start: int
    total_end: int
    total_increase: int
    total_pph: int
    avg_target: float
    net_hours: float


@dataclass(frozen=True)
class PPHReport:
    rows: tuple[StationReport, ...]
    totals: AggregateTotals
    start_label: str
    end_label: str
    net_hours: float
    window_valid: bool
    above_target: tuple[str, ...] = ()
    below_target: tuple[str, ...] = ()
    critical: tuple[str, ...] = ()

    def to_frame(self) -> pd.DataFrame:
        """One row per station, in report order."""
        columns = [
            "station", "start_label", "end_label", "start_volume", "end_volume",
            "increase", "net_hours", "pph", "target", "status",
        ]
        records = [
            {
                "station": r.name,
                "start_label": r.start.label,
                "end_label": r.end.label,
                "start_volume": r.start.volume,
                "end_volume": r.end.volume,
                "increase": r.increase,
                "net_hours": r.net_hours,
                "pph": r.pph,
                "target": r.target,
                "status": r.status.value,
            }
            for r in self.rows
        ]
        return pd.DataFrame(records, columns=columns)


# ---------------------------------------------------------------------------
# Shift records
# ---------------------------------------------------------------------------

@dataclass
class ShiftTask:
    id: str
    process_type: str
    client_name: str
    station: str
    employee: str
    expected_volume: int
    actual_volume: int = 0
    start_time: str = ""
    end_time: str = ""
    target_pph: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ShiftData:
    id: str
    date: str
    supervisor_name: str = ""
    shift: str = ""
    global_start_time: str = ""
    global_end_time: str = ""
    tasks: list[ShiftTask] = field(default_factory=list)
    lunch_start_time: str = ""
    lunch_end_time: str = ""
    safety_incident: bool = False
    five_s_status: str = "Bom"
    missing_employees_count: int = 0
    general_notes: str = ""
