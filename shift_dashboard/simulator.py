"""
Simulated export generator for the shift dashboard.

Generates realistic station status exports based on typical sorting-floor
throughput. All values are synthetic; no real operational data is used.
"""

import numpy as np
import pandas as pd

from .config import DEFAULT_TARGET_PPH

# Seed for reproducibility
_RNG = np.random.default_rng(42)

# ---------------------------------------------------------------------------
# Typical station parameters (pieces per hour)
# ---------------------------------------------------------------------------
_STATIONS = {
    "DOCK 01": {"target": 250, "mean_pph": 310, "std": 40},
    "DOCK 02": {"target": 250, "mean_pph": 240, "std": 35},
    "DOCK 03": {"target": 200, "mean_pph": 150, "std": 30},
    "SORTER A": {"target": 400, "mean_pph": 620, "std": 60},
    "SORTER B": {"target": 400, "mean_pph": 330, "std": 50},
    "MANUAL 1": {"target": 120, "mean_pph": 50, "std": 15},
}

_ROUTING_HEADER = [
    "Data", "Hora", "Estação", "Transferência para", "Embarque recebido",
    "Descarregado", "Recebido CD de", "Em rota", "Roteirizado",
]

_SNAPSHOT_HEADER = [
    "Data", "Hora", "Estação", "Transferência para", "Embarque recebido",
    "Descarregado", "Recebido CD de", "Total para roteirizar", "Em rota",
    "Outros status",
]


def generate_registry_records() -> list[dict]:
    """Station target records in registry export form."""
    return [
        {"name": name, "targetPPH": params["target"]}
        for name, params in _STATIONS.items()
    ]


def generate_routing_csv(
    start: str = "2026-03-02 06:00",
    n_points: int = 9,
    interval_minutes: int = 60,
    missing_rate: float = 0.1,
) -> str:
    """Generate a ';'-separated routing export with cumulative volumes.

    Each station reports its running volume every `interval_minutes`;
    about `missing_rate` of the reports are dropped to mimic sparse
    stations, so the carry-forward logic gets exercised.
    """
    instants = pd.date_range(start, periods=n_points, freq=f"{interval_minutes}min")
    lines = [";".join(_ROUTING_HEADER)]

    for name, params in _STATIONS.items():
        volume = int(_RNG.integers(0, 200))
        for i, ts in enumerate(instants):
            if i > 0:
                rate = max(0.0, _RNG.normal(params["mean_pph"], params["std"]))
                volume += int(rate * interval_minutes / 60)
            # keep the first and last reports so every station has a span
            if 0 < i < n_points - 1 and _RNG.random() < missing_rate:
                continue
            lines.append(";".join([
                ts.strftime("%d/%m/%Y"),
                ts.strftime("%H:%M"),
                name,
                "0", "0", "0", "0", "0",
                str(volume),
            ]))

    return "\n".join(lines)


def _br_format(value: int) -> str:
    return f"{value:,}".replace(",", ".")


def generate_snapshot_csv(
    date: str = "02/03/2026",
    times: tuple[str, ...] = ("06:00", "10:00", "14:00"),
) -> str:
    """Generate a header-matched station status export (Brazilian numbers)."""
    lines = [";".join(_SNAPSHOT_HEADER)]

    for time in times:
        for name, params in _STATIONS.items():
            scale = params.get("target", DEFAULT_TARGET_PPH)
            values = [
                int(_RNG.integers(0, scale // 2)),      # transfer
                int(_RNG.integers(0, scale)),           # shipment received
                int(_RNG.integers(0, scale * 2)),       # unloaded
                int(_RNG.integers(0, scale)),           # received
                int(_RNG.integers(scale, scale * 8)),   # to route
                int(_RNG.integers(0, scale * 4)),       # en route
                int(_RNG.integers(0, 20)),              # other
            ]
            lines.append(";".join([date, time, name, *(_br_format(v) for v in values)]))

    return "\n".join(lines)
