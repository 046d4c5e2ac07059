import datetime as dt

import pytest

from medicare.booking.slots import available_slots, slots_for_draft
from medicare.domain.models import AppointmentType, AvailabilityWindow, Doctor

# 2026-10-19 is a Monday.
TODAY = dt.date(2026, 10, 19)
NEXT_MONDAY = dt.date(2026, 10, 26)
NOW = dt.datetime(2026, 10, 19, 14, 30)

DEFAULT_HOURS = [f"{h:02d}:00" for h in range(9, 21)]


def _window(day: str, start: str, end: str, available: bool = True) -> AvailabilityWindow:
    return AvailabilityWindow(day=day, start_time=start, end_time=end, is_available=available)


class TestDefaultRange:
    @pytest.mark.parametrize("windows", [None, []])
    def test_no_windows_uses_business_hours(self, windows: list | None) -> None:
        assert available_slots(windows, NEXT_MONDAY, now=NOW) == DEFAULT_HOURS

    def test_today_excludes_current_and_past_hours(self) -> None:
        slots = available_slots(None, TODAY, now=NOW)

        assert slots == [f"{h:02d}:00" for h in range(15, 21)]

    def test_today_after_closing_is_empty(self) -> None:
        assert available_slots(None, TODAY, now=dt.datetime(2026, 10, 19, 21, 5)) == []

    def test_no_date_yields_nothing(self) -> None:
        assert available_slots(None, None, now=NOW) == []


class TestDoctorWindows:
    def test_uses_matching_weekday(self) -> None:
        windows = [_window("Monday", "10:00", "13:00"), _window("Tuesday", "14:00", "18:00")]

        assert available_slots(windows, NEXT_MONDAY, now=NOW) == ["10:00", "11:00", "12:00"]

    def test_no_window_that_day(self) -> None:
        windows = [_window("Tuesday", "14:00", "18:00")]

        assert available_slots(windows, NEXT_MONDAY, now=NOW) == []

    def test_unavailable_window_is_skipped(self) -> None:
        windows = [_window("Monday", "10:00", "13:00", available=False)]

        assert available_slots(windows, NEXT_MONDAY, now=NOW) == []

    def test_invalid_window_is_skipped_with_warning(self, warnings_logged: list[str]) -> None:
        windows = [_window("Monday", "18:00", "09:00"), _window("Monday", "09:00", "11:00")]

        assert available_slots(windows, NEXT_MONDAY, now=NOW) == ["09:00", "10:00"]
        assert any("Ignoring availability window" in m for m in warnings_logged)

    def test_monday_nine_to_six_today(self) -> None:
        windows = [_window("Monday", "09:00", "18:00")]

        assert available_slots(windows, TODAY, now=NOW) == ["15:00", "16:00", "17:00"]

    def test_monday_nine_to_six_next_week(self) -> None:
        windows = [_window("Monday", "09:00", "18:00")]

        slots = available_slots(windows, NEXT_MONDAY, now=NOW)

        assert slots == [f"{h:02d}:00" for h in range(9, 18)]
        assert "18:00" not in slots

    def test_today_is_clipped_to_future_hours(self) -> None:
        windows = [_window("Monday", "9:00", "17:00")]

        assert available_slots(windows, TODAY, now=NOW) == ["15:00", "16:00"]

    def test_every_slot_is_in_the_future(self) -> None:
        windows = [_window("Monday", "08:00", "22:00")]

        for slot in available_slots(windows, TODAY, now=NOW):
            hour = int(slot.split(":")[0])
            assert dt.datetime.combine(TODAY, dt.time(hour)) > NOW


class TestSlotsForDraft:
    @pytest.fixture
    def doctor(self) -> Doctor:
        return Doctor(
            id="d-1",
            name="Dr. Rao",
            available_slots=[_window("Monday", "10:00", "12:00")],
        )

    def test_consultation_follows_doctor(self, doctor: Doctor) -> None:
        slots = slots_for_draft(AppointmentType.CONSULTATION, doctor, NEXT_MONDAY, now=NOW)

        assert slots == ["10:00", "11:00"]

    def test_consultation_without_doctor(self) -> None:
        assert slots_for_draft(AppointmentType.CONSULTATION, None, NEXT_MONDAY, now=NOW) == []

    def test_test_ignores_doctor(self, doctor: Doctor) -> None:
        slots = slots_for_draft(AppointmentType.TEST, doctor, NEXT_MONDAY, now=NOW)

        assert slots == DEFAULT_HOURS
