"""
Read-only station target registry.

The registry itself is maintained elsewhere (registry screen, sync service);
this module only loads an exported copy and answers target lookups.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from .config import DEFAULT_TARGET_PPH, INITIAL_REGISTRY

logger = logging.getLogger(__name__)


def _normalise_name(name: str) -> str:
    return str(name).strip().casefold()


class TargetRegistry:
    """Station name -> target PPH, matched case-insensitively after trimming."""

    def __init__(self, targets: dict[str, int] | None = None) -> None:
        self._targets: dict[str, int] = {}
        self._exact: dict[str, int] = {}
        for name, target in (targets or {}).items():
            self._exact.setdefault(name, target)
            self._targets.setdefault(_normalise_name(name), target)

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> "TargetRegistry":
        """Build from registry station records: [{"name": ..., "targetPPH": ...}]."""
        targets = {}
        for rec in records:
            name = rec.get("name")
            if not name:
                continue
            try:
                targets.setdefault(name, int(rec.get("targetPPH", DEFAULT_TARGET_PPH)))
            except (TypeError, ValueError):
                logger.warning("Invalid target for station %r: %r", name, rec.get("targetPPH"))
        return cls(targets)

    def __len__(self) -> int:
        return len(self._exact)

    def __contains__(self, name: str) -> bool:
        return _normalise_name(name) in self._targets

    def target_for(self, name: str) -> int:
        """Registered target for `name`, or DEFAULT_TARGET_PPH."""
        return self._targets.get(_normalise_name(name), DEFAULT_TARGET_PPH)

    def find(self, name: str) -> int | None:
        """Target registered under exactly `name`, or None."""
        return self._exact.get(name)

    def stations(self) -> list[str]:
        return list(self._exact)


def load_registry_data(path: str | Path) -> dict[str, list]:
    """Load the registry export, filling absent sections from INITIAL_REGISTRY."""
    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except Exception:
        logger.exception("Failed to read registry file: %s", path)
        raise

    data = {key: list(default) for key, default in INITIAL_REGISTRY.items()}
    if isinstance(raw, dict):
        for key in data:
            if isinstance(raw.get(key), list):
                data[key] = raw[key]
    else:
        logger.warning("Registry file %s is not an object, using defaults", path)
    return data


def load_registry(path: str | Path) -> TargetRegistry:
    """Load station targets from a registry JSON export."""
    data = load_registry_data(path)
    registry = TargetRegistry.from_records(
        s for s in data["stations"] if isinstance(s, dict)
    )
    logger.info("Loaded %d station targets from %s", len(registry), path)
    return registry
