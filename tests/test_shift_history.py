"""
Tests for the shift history export loader.
"""

import json

import pytest

from shift_dashboard.loaders import find_last_shift_with_tasks, load_shift_history
from shift_dashboard.loaders.shift_history import parse_shift


@pytest.fixture
def history_file(tmp_path):
    records = [
        {
            "id": "s1", "date": "2024-03-01", "supervisorName": "Rita", "shift": "Manhã",
            "tasks": [{"id": "t1", "processType": "Roteirização", "clientName": "Anjun",
                       "station": "SP01", "employee": "Ana",
                       "expectedVolume": "120", "actualVolume": 80, "targetPPH": "300"}],
        },
        {"id": "s2", "date": "2024-03-02", "tasks": []},
        "not a shift",
    ]
    path = tmp_path / "shift_history.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


class TestLoadShiftHistory:

    def test_newest_first(self, history_file):
        history = load_shift_history(history_file)
        assert [s.id for s in history] == ["s2", "s1"]

    def test_fields_coerced(self, history_file):
        shift = load_shift_history(history_file)[1]
        assert shift.supervisor_name == "Rita"
        task = shift.tasks[0]
        assert task.expected_volume == 120
        assert task.actual_volume == 80
        assert task.target_pph == 300
        assert task.process_type == "Roteirização"

    def test_history_wrapper_object(self, tmp_path):
        path = tmp_path / "h.json"
        path.write_text(json.dumps({"history": [{"id": "a"}, {"id": "b"}]}), encoding="utf-8")
        assert [s.id for s in load_shift_history(path)] == ["b", "a"]

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "h.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_shift_history(path)


class TestParseShift:

    def test_tasks_as_json_string(self):
        raw = {"id": "s", "tasks": json.dumps([{"id": "t", "expectedVolume": 5}])}
        shift = parse_shift(raw)
        assert shift.tasks[0].expected_volume == 5
        assert shift.tasks[0].target_pph is None

    def test_unreadable_tasks(self):
        assert parse_shift({"id": "s", "tasks": "[oops"}).tasks == []

    def test_defaults(self):
        shift = parse_shift({"id": "s"})
        assert shift.five_s_status == "Bom"
        assert shift.missing_employees_count == 0
        assert shift.safety_incident is False


class TestFindLastShiftWithTasks:

    def test_skips_empty_and_current(self, history_file):
        history = load_shift_history(history_file)
        assert find_last_shift_with_tasks(history).id == "s1"
        assert find_last_shift_with_tasks(history, exclude_id="s1") is None
