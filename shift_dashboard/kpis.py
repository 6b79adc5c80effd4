"""
KPI computation functions. Pure, no side effects.

Provides PPH calculation, status classification against a target,
per-station report rows and report-wide totals.
"""

import logging
import math

from .config import CRITICAL_RATIO, FALLBACK_STATUS, STATUS_TIERS
from .models import AggregateTotals, Observation, StationReport, Status

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest int, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def calc_pph(increase: int, net_hours: float) -> int:
    """Pieces per hour, rounded; 0 when there is no elapsed time."""
    if net_hours <= 0:
        return 0
    return round_half_up(increase / net_hours)


def classify_status(pph: float, target: float) -> Status:
    """Return the throughput tier of `pph` relative to `target`.

    Logic
    -----
        TOP      if pph >= target * 1.5
        OPTIMAL  if pph >= target
        GOOD     if pph >= target * 0.75
        MEDIUM   if pph >= target * 0.5
        LOW      otherwise

    Thresholds are inclusive, so a boundary value takes the higher tier.
    """
    for status, ratio in STATUS_TIERS:
        if pph >= target * ratio:
            return Status(status)
    return Status(FALLBACK_STATUS)


def build_station_report(
    name: str,
    start: Observation,
    end: Observation,
    net_hours: float,
    target: int,
) -> StationReport:
    increase = end.volume - start.volume
    pph = calc_pph(increase, net_hours)
    return StationReport(
        name=name,
        start=start,
        end=end,
        increase=increase,
        net_hours=net_hours,
        pph=pph,
        target=target,
        status=classify_status(pph, target),
    )


def sort_by_pph(rows: list[StationReport]) -> list[StationReport]:
    """Highest throughput first; ties keep their original order."""
    return sorted(rows, key=lambda r: r.pph, reverse=True)


def calc_totals(rows: list[StationReport], net_hours: float) -> AggregateTotals:
    """Sum volumes across stations.

    The overall PPH is computed from the summed increase, not averaged
    from per-station PPH values.
    """
    total_increase = sum(r.increase for r in rows)
    avg_target = sum(r.target for r in rows) / len(rows) if rows else 0
    return AggregateTotals(
        total_start=sum(r.start.volume for r in rows),
        total_end=sum(r.end.volume for r in rows),
        total_increase=total_increase,
        total_pph=calc_pph(total_increase, net_hours),
        avg_target=avg_target,
        net_hours=net_hours,
    )


def split_by_target(
    rows: list[StationReport],
) -> tuple[list[str], list[str], list[str]]:
    """Return (above_target, below_target, critical) station names.

    Critical stations run below half their target.
    """
    above = [r.name for r in rows if r.pph >= r.target]
    below = [r.name for r in rows if r.pph < r.target]
    critical = [r.name for r in rows if r.pph < r.target * CRITICAL_RATIO]
    return above, below, critical
