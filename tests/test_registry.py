"""
Tests for station target lookups and the registry JSON export.
"""

import json

import pytest

from shift_dashboard.config import DEFAULT_TARGET_PPH
from shift_dashboard.registry import TargetRegistry, load_registry, load_registry_data


class TestTargetRegistry:

    def test_lookup_trims_and_ignores_case(self):
        registry = TargetRegistry({" Dock 01 ": 250})
        assert registry.target_for("DOCK 01") == 250
        assert registry.target_for("dock 01  ") == 250
        assert "dock 01" in registry

    def test_unregistered_station_gets_default(self):
        assert TargetRegistry().target_for("ANY") == DEFAULT_TARGET_PPH

    def test_first_entry_wins_for_normalised_duplicates(self):
        registry = TargetRegistry({"SP01": 100, "sp01": 300})
        assert registry.target_for("Sp01") == 100
        assert len(registry) == 2

    def test_find_is_exact(self):
        registry = TargetRegistry({"SP01": 100})
        assert registry.find("SP01") == 100
        assert registry.find("sp01") is None

    def test_from_records_skips_bad_entries(self):
        registry = TargetRegistry.from_records([
            {"name": "A", "targetPPH": "150"},
            {"name": "", "targetPPH": 10},
            {"name": "B", "targetPPH": "fast"},
            {"name": "C"},
        ])
        assert registry.stations() == ["A", "C"]
        assert registry.target_for("A") == 150
        assert registry.target_for("C") == DEFAULT_TARGET_PPH


class TestLoadRegistry:

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text(json.dumps({
            "stations": [{"id": "1", "name": "SP01", "targetPPH": 320}, "junk"],
        }), encoding="utf-8")
        registry = load_registry(path)
        assert len(registry) == 1
        assert registry.target_for("sp01") == 320

    def test_missing_sections_filled_with_defaults(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text(json.dumps({"stations": []}), encoding="utf-8")
        data = load_registry_data(path)
        assert "Total Express" in data["clients"]
        assert data["employees"] == []

    def test_non_object_file_uses_defaults(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_registry_data(path)["stations"] == []

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_registry(tmp_path / "nope.json")
