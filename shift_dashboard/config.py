"""
Configuration: target defaults, status tiers, CSV column layouts, file paths.

STATUS_TIERS maps each throughput status to the minimum pph/target ratio
that earns it, evaluated top-down (first match wins).
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths: adjust these if source files move
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent

REGISTRY_FILE = DATA_DIR / "registry.json"
SHIFT_HISTORY_FILE = DATA_DIR / "shift_history.json"
SAMPLE_CSV_FILE = DATA_DIR / "routing_export.csv"

# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------
DEFAULT_TARGET_PPH = 200

# ratio thresholds: pph >= target * ratio
STATUS_TIERS: list[tuple[str, float]] = [
    ("TOP", 1.5),
    ("OPTIMAL", 1.0),
    ("GOOD", 0.75),
    ("MEDIUM", 0.5),
]
FALLBACK_STATUS = "LOW"

CRITICAL_RATIO = 0.5

# ---------------------------------------------------------------------------
# Fixed-position routing export (PPH analysis path)
# ---------------------------------------------------------------------------
MIN_COLUMNS = 9
COL_DATE = 0
COL_TIME = 1
COL_STATION = 2
COL_VOLUME = 8

MIN_TIME_POINTS = 2

# ---------------------------------------------------------------------------
# Header-matched exports
# ---------------------------------------------------------------------------
# Each column resolves to the first normalised header containing any of its
# keywords. Keywords are written in normalised form (uppercase, no accents).
ESSENTIAL_COLUMNS = ("date", "time", "station")

PLANNING_COLUMNS: dict[str, tuple[str, ...]] = {
    "date": ("DATA",),
    "time": ("HORA",),
    "station": ("ESTACAO",),
    "transfer": ("TRANSFERENCIA PARA",),
    "shipment_received": ("EMBARQUE RECEBIDO",),
    "unloaded": ("DESCARREGADO",),
    "received": ("RECEBIDO CD DE",),
    "to_route": ("TOTAL PARA ROTEIRIZAR",),
    "en_route": ("EM ROTA",),
    "other_status": ("OUTROS STATUS",),
}

TASK_COLUMNS: dict[str, tuple[str, ...]] = {
    "date": ("DATA",),
    "time": ("HORA",),
    "station": ("ESTACAO", "STATION"),
    "routing": ("ROTEIRIZAR", "ROTEIRIZACAO"),
    "loading": ("EM ROTA",),
    "unloaded": ("DESCARREGADO",),
    "received": ("RECEBIDO", "EMBARQUE RECEBIDO"),
}

# ---------------------------------------------------------------------------
# Shift tasks
# ---------------------------------------------------------------------------
PROCESS_ROUTING = "Roteirização"
PROCESS_LOADING = "Carregamento"
PROCESS_RECEIVING = "Recebimento"

AUTO_TASK_CLIENT = "Total Express"
AUTO_TASK_EMPLOYEE = "A definir"
CARRY_OVER_SUFFIX = "(SOBRA)"

DEFAULT_CLIENT_GROUP = "Geral"
HISTORY_LIMIT = 15
TOP_PERFORMERS = 3

INITIAL_REGISTRY: dict[str, list] = {
    "employees": [],
    "clients": ["Total Express", "Imille", "Anjun", "Menezes"],
    "stations": [],
    "processes": [PROCESS_RECEIVING, PROCESS_ROUTING, PROCESS_LOADING],
    "supervisors": [],
}
