"""
Shift Floor Dashboard: end-to-end PPH pipeline.

Runs the routing-export pipeline from a CSV file (or simulated data) to a
printed PPH report.

Usage:
    python main.py [export.csv] [--registry registry.json]
                   [--start "2026-03-02 06:00"] [--end "2026-03-02 14:00"]
                   [--break 10:00-10:30]
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from shift_dashboard.config import REGISTRY_FILE, SAMPLE_CSV_FILE
from shift_dashboard.dashboard import format_duration, generate_pph_report
from shift_dashboard.exceptions import IngestError
from shift_dashboard.loaders import load_routing_csv, read_upload_text
from shift_dashboard.models import SelectionWindow
from shift_dashboard.registry import TargetRegistry, load_registry
from shift_dashboard.simulator import generate_registry_records, generate_routing_csv

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Per-station PPH report from a routing export")
    parser.add_argument("csv", nargs="?", help="Routing export (.csv or .xlsx); defaults to the sample export, else simulated data")
    parser.add_argument("--registry", help=f"Registry JSON export (default: {REGISTRY_FILE.name} if present)")
    parser.add_argument("--start", help="Window start, e.g. '2026-03-02 06:00' (default: earliest)")
    parser.add_argument("--end", help="Window end (default: latest)")
    parser.add_argument("--break", dest="break_range", metavar="HH:MM-HH:MM", help="Break to discount")
    return parser.parse_args(argv)


def _load_registry(path: str | None, simulated: bool) -> TargetRegistry:
    if path:
        return load_registry(path)
    if REGISTRY_FILE.exists():
        return load_registry(REGISTRY_FILE)
    if simulated:
        return TargetRegistry.from_records(generate_registry_records())
    logger.warning("No registry found, every station uses the default target")
    return TargetRegistry()


def main(argv: list[str] | None = None) -> int:
    """Run the PPH pipeline and print the report."""
    args = _parse_args(argv)

    print("=" * 70)
    print("  SHIFT FLOOR DASHBOARD - PPH Report")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load source data
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING EXPORT")
    print("-" * 40)

    path = Path(args.csv) if args.csv else SAMPLE_CSV_FILE
    if args.csv and not path.exists():
        logger.error("Export not found: %s", path)
        return 1
    simulated = not path.exists()
    if not simulated:
        logger.info("Reading export from %s", path)
        text = read_upload_text(path.read_bytes(), path.name)
    else:
        logger.info("No export given, using simulated data")
        text = generate_routing_csv()

    try:
        result = load_routing_csv(text)
    except IngestError as e:
        logger.error("Could not ingest export: %s", e)
        return 1

    print(f"\n{len(result.series)} stations, {len(result.time_index)} time points "
          f"({result.rows_skipped} of {result.rows_read} rows skipped)")

    registry = _load_registry(args.registry, simulated=simulated)

    # ------------------------------------------------------------------
    # 2. Build selection window
    # ------------------------------------------------------------------
    default_start, default_end = result.time_index.default_window()
    start = pd.Timestamp(args.start) if args.start else default_start
    end = pd.Timestamp(args.end) if args.end else default_end

    break_start, break_end = "", ""
    if args.break_range:
        break_start, _, break_end = args.break_range.partition("-")

    window = SelectionWindow(
        start=start,
        end=end,
        break_enabled=bool(args.break_range),
        break_start=break_start,
        break_end=break_end,
    )

    # ------------------------------------------------------------------
    # 3. Report
    # ------------------------------------------------------------------
    report = generate_pph_report(result.series, result.time_index, window, registry)

    print("\n")
    print("[ 2 ] PPH REPORT")
    print("-" * 40)
    if not report.window_valid:
        print("\n  WARNING: window start is not before window end")
    print(f"\nWindow: {report.start_label or start} -> {report.end_label or end}"
          f"   net time {format_duration(report.net_hours)}")

    table = report.to_frame()
    if not table.empty:
        print(table[["station", "start_volume", "end_volume", "increase", "pph", "target", "status"]]
              .to_string(index=False))

    totals = report.totals
    print(f"\nTotal increase: {totals.total_increase:,}   overall PPH: {totals.total_pph}"
          f"   average target: {totals.avg_target:.0f}")

    print(f"\nAbove target ({len(report.above_target)}): {', '.join(report.above_target) or 'none'}")
    print(f"Below target ({len(report.below_target)}): {', '.join(report.below_target) or 'none'}")
    if report.critical:
        print(f"Critical (<50%): {', '.join(report.critical)}")

    print("\n" + "=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
