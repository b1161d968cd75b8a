"""
Tests for scheduler/snapshot.py and the command-line runner.
"""

import json
import logging
from datetime import time

import pytest
from pydantic import ValidationError

import run_availability
from config.settings import get_settings
from models import AppointmentStatus, RecurrencePattern
from scheduler.snapshot import load_snapshot


@pytest.fixture
def raw_snapshot():
    return {
        "services": [
            {"id": "svc_60", "name": "Signature Facial", "duration_minutes": 60},
            {"id": "svc_lash", "duration_minutes": 30, "buffer_before_minutes": 15, "buffer_after_minutes": 15},
        ],
        "appointments": [
            {
                "id": "a_1",
                "service_id": "svc_60",
                "start": "2025-03-04T10:00:00-05:00",
                "end": "2025-03-04T11:00:00-05:00",
                "status": "arrived",
            },
        ],
        "time_off": [
            {
                "id": "to_lunch",
                "start": "2025-03-03T12:00:00-05:00",
                "end": "2025-03-03T13:00:00-05:00",
                "is_recurring": True,
                "pattern": "daily",
            },
        ],
        "business_hours": {"1": ["09:00", "17:00"], "6": ["09:00", "12:00", "13:00", "15:30"]},
    }


class TestLoadSnapshot:

    def test_loads_every_section(self, raw_snapshot):
        snapshot = load_snapshot(raw_snapshot)
        assert set(snapshot.services) == {"svc_60", "svc_lash"}
        assert snapshot.appointments[0].status == AppointmentStatus.ARRIVED
        assert snapshot.time_off[0].pattern == RecurrencePattern.DAILY
        assert [w.close_time for w in snapshot.business_hours.windows_for(5)] == [time(12, 0), time(15, 30)]
        assert not snapshot.business_hours.is_open_on(1)

    def test_structured_business_hours(self, raw_snapshot):
        raw_snapshot["business_hours"] = {"2": [{"open_time": "10:00:00", "close_time": "18:00:00"}]}
        snapshot = load_snapshot(raw_snapshot)
        assert snapshot.business_hours.windows_for(2)[0].open_time == time(10, 0)

    def test_per_day_records(self, raw_snapshot):
        raw_snapshot["business_hours"] = [
            {"dayOfWeek": 0, "isOpen": False, "timeSlots": []},
            {"dayOfWeek": 1, "isOpen": True, "timeSlots": ["08:00", "17:30"]},
            {"dayOfWeek": 2, "isOpen": False, "timeSlots": ["08:00", "17:30"]},
        ]
        hours = load_snapshot(raw_snapshot).business_hours
        assert hours.windows_for(0)[0].close_time == time(17, 30)
        assert not hours.is_open_on(1)
        assert not hours.is_open_on(6)

    def test_bad_rows_are_skipped_with_warning(self, raw_snapshot, caplog):
        raw_snapshot["services"].append({"id": "svc_broken", "duration_minutes": 0})
        raw_snapshot["appointments"].append({
            "id": "a_backwards",
            "service_id": "svc_60",
            "start": "2025-03-04T11:00:00-05:00",
            "end": "2025-03-04T10:00:00-05:00",
        })
        with caplog.at_level(logging.WARNING):
            snapshot = load_snapshot(raw_snapshot)

        assert "svc_broken" not in snapshot.services
        assert [a.id for a in snapshot.appointments] == ["a_1"]
        assert "svc_broken" in caplog.text
        assert "a_backwards" in caplog.text

    def test_mixed_naive_and_aware_row_is_skipped(self, raw_snapshot, caplog):
        raw_snapshot["time_off"].append({
            "id": "to_mixed",
            "start": "2025-03-03T12:00:00",
            "end": "2025-03-03T13:00:00-05:00",
        })
        with caplog.at_level(logging.WARNING):
            snapshot = load_snapshot(raw_snapshot)
        assert [t.id for t in snapshot.time_off] == ["to_lunch"]
        assert "to_mixed" in caplog.text

    def test_overlapping_business_hours_rejected(self, raw_snapshot):
        raw_snapshot["business_hours"] = {"0": ["09:00", "13:00", "12:00", "17:00"]}
        with pytest.raises(ValidationError):
            load_snapshot(raw_snapshot)

    def test_missing_sections_default_to_empty(self):
        snapshot = load_snapshot({})
        assert snapshot.services == {}
        assert snapshot.appointments == []
        assert not snapshot.business_hours.days

    def test_loads_from_file(self, raw_snapshot, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(raw_snapshot))
        snapshot = load_snapshot(path)
        assert len(snapshot.appointments) == 1


class TestRunner:

    @pytest.fixture(autouse=True)
    def utc_settings(self, monkeypatch):
        monkeypatch.setenv("BUSINESS_TIMEZONE", "UTC")
        monkeypatch.setenv("ALLOW_SAME_DAY_BOOKING", "true")
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def write_snapshot(self, tmp_path, data):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(data))
        return str(path)

    def test_prints_slots_for_future_day(self, tmp_path, capsys):
        path = self.write_snapshot(tmp_path, {
            "services": [{"id": "svc_60", "duration_minutes": 60}],
            "business_hours": {"1": ["09:00", "11:00"]},
        })
        # 2099-01-05 is a Monday
        exit_code = run_availability.main([path, "--service", "svc_60", "--date", "2099-01-05", "--step", "30"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "2099-01-05 (Mon): 09:00, 09:30, 10:00" in out

    def test_unknown_service_exits_nonzero(self, tmp_path):
        path = self.write_snapshot(tmp_path, {"services": [], "business_hours": {"1": ["09:00", "17:00"]}})
        assert run_availability.main([path, "--service", "svc_missing", "--date", "2099-01-05"]) == 1
