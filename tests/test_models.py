"""
Tests for the pydantic models in models/
"""

from datetime import time

import pytest
from pydantic import ValidationError

from models import (
    Appointment,
    AppointmentStatus,
    BusinessHours,
    OpenWindow,
    RecurrencePattern,
    Service,
    TimeOff,
)

from .conftest import MONDAY, SUNDAY, TUESDAY


class TestService:

    def test_total_block_includes_buffers(self, services):
        assert services["svc_buffered"].total_block_minutes == 60

    @pytest.mark.parametrize("duration", [0, -30])
    def test_non_positive_duration_rejected(self, duration):
        with pytest.raises(ValidationError):
            Service(id="svc_bad", duration_minutes=duration)

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValidationError):
            Service(id="svc_bad", duration_minutes=30, buffer_after_minutes=-5)

    def test_frozen(self, services):
        with pytest.raises(ValidationError):
            services["svc_60"].duration_minutes = 90


class TestAppointment:

    def test_end_must_follow_start(self, at):
        with pytest.raises(ValidationError):
            Appointment(id="a_bad", service_id="svc_60", start=at(TUESDAY, 10), end=at(TUESDAY, 10))

    def test_for_service_derives_end(self, services, at):
        appointment = Appointment.for_service("a_1", services["svc_60"], at(TUESDAY, 10), client_name="Dana")
        assert appointment.end == at(TUESDAY, 11)
        assert appointment.status == AppointmentStatus.CONFIRMED
        assert appointment.client_name == "Dana"

    @pytest.mark.parametrize("status, occupies", [
        (AppointmentStatus.CONFIRMED, True),
        (AppointmentStatus.ARRIVED, True),
        (AppointmentStatus.COMPLETED, True),
        (AppointmentStatus.CANCELED, False),
        (AppointmentStatus.NO_SHOW, False),
    ])
    def test_occupies_calendar(self, status, occupies):
        assert status.occupies_calendar is occupies

    def test_status_parsed_from_storage_value(self, at):
        appointment = Appointment(
            id="a_1", service_id="svc_60", start=at(TUESDAY, 10), end=at(TUESDAY, 11), status="no_show"
        )
        assert appointment.status == AppointmentStatus.NO_SHOW
        assert not appointment.occupies_calendar


class TestTimeOff:

    def test_one_time_defaults(self, at):
        block = TimeOff(id="to_1", start=at(MONDAY, 9), end=at(MONDAY, 10))
        assert block.pattern == RecurrencePattern.NONE
        assert block.is_active

    def test_end_must_follow_start(self, at):
        with pytest.raises(ValidationError):
            TimeOff(id="to_bad", start=at(MONDAY, 10), end=at(MONDAY, 9))

    def test_pattern_without_recurring_flag_rejected(self, at):
        with pytest.raises(ValidationError):
            TimeOff(id="to_bad", start=at(MONDAY, 9), end=at(MONDAY, 10), pattern=RecurrencePattern.DAILY)

    def test_recurring_without_pattern_rejected(self, at):
        with pytest.raises(ValidationError):
            TimeOff(id="to_bad", start=at(MONDAY, 9), end=at(MONDAY, 10), is_recurring=True)

    def test_recurrence_end_before_start_rejected(self, at):
        with pytest.raises(ValidationError):
            TimeOff(
                id="to_bad",
                start=at(TUESDAY, 9),
                end=at(TUESDAY, 10),
                is_recurring=True,
                pattern=RecurrencePattern.WEEKLY,
                recurrence_end_date=at(MONDAY, 0),
            )


class TestBusinessHours:

    def test_windows_sorted(self):
        hours = BusinessHours(days={0: [
            OpenWindow(open_time=time(13), close_time=time(17)),
            OpenWindow(open_time=time(9), close_time=time(12)),
        ]})
        assert [w.open_time for w in hours.windows_for(0)] == [time(9), time(13)]

    def test_overlapping_windows_rejected(self):
        with pytest.raises(ValidationError):
            BusinessHours(days={0: [
                OpenWindow(open_time=time(9), close_time=time(13)),
                OpenWindow(open_time=time(12), close_time=time(17)),
            ]})

    def test_adjacent_windows_allowed(self):
        hours = BusinessHours(days={0: [
            OpenWindow(open_time=time(9), close_time=time(12)),
            OpenWindow(open_time=time(12), close_time=time(17)),
        ]})
        assert len(hours.windows_for(0)) == 2

    def test_invalid_weekday_rejected(self):
        with pytest.raises(ValidationError):
            BusinessHours.weekly(time(9), time(17), weekdays=(7,))

    def test_window_must_close_after_opening(self):
        with pytest.raises(ValidationError):
            OpenWindow(open_time=time(17), close_time=time(9))

    def test_from_time_slots_pairs_values(self):
        # stored weekdays count from Sunday: 1 is Monday, 3 is Wednesday
        hours = BusinessHours.from_time_slots({
            1: ["09:00", "12:00", "13:00", "17:00"],
            3: ["10:00", "14:00", "16:00"],
            0: [],
        })
        assert [(w.open_time, w.close_time) for w in hours.windows_for(0)] == [
            (time(9), time(12)), (time(13), time(17))
        ]
        # trailing unpaired value ignored
        assert [(w.open_time, w.close_time) for w in hours.windows_for(2)] == [(time(10), time(14))]
        assert not hours.is_open_on(6)

    def test_default_stored_week_lands_on_right_days(self):
        """Closed Sunday and Saturday, 08:00-17:30 Monday to Thursday, 09:00-15:30 Friday."""
        records = [{"dayOfWeek": 0, "isOpen": False, "timeSlots": []}]
        records += [{"dayOfWeek": d, "isOpen": True, "timeSlots": ["08:00", "17:30"]} for d in (1, 2, 3, 4)]
        records += [
            {"dayOfWeek": 5, "isOpen": True, "timeSlots": ["09:00", "15:30"]},
            {"dayOfWeek": 6, "isOpen": False, "timeSlots": []},
        ]
        hours = BusinessHours.from_day_records(records)

        assert hours.windows_for(MONDAY.weekday())[0].open_time == time(8, 0)
        assert hours.windows_for(4)[0].close_time == time(15, 30)
        assert not hours.is_open_on(SUNDAY.weekday())
        assert not hours.is_open_on(5)

    def test_closed_flag_wins_over_time_slots(self):
        hours = BusinessHours.from_day_records([{"dayOfWeek": 1, "isOpen": False, "timeSlots": ["08:00", "17:30"]}])
        assert not hours.is_open_on(0)

    def test_closed_weekday_has_no_windows(self, weekday_hours):
        assert weekday_hours.windows_for(5) == []
        assert weekday_hours.is_open_on(4)
