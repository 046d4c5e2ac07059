import datetime as dt
from zoneinfo import ZoneInfo

import pytest

from medicare.booking.datetime_helpers import (
    format_hour,
    local_now,
    resolve_timezone,
    weekday_name,
)


class TestWeekdayName:
    @pytest.mark.parametrize(
        ("date", "expected"),
        [
            (dt.date(2026, 10, 19), "Monday"),
            (dt.date(2026, 10, 24), "Saturday"),
            (dt.date(2026, 10, 25), "Sunday"),
        ],
    )
    def test_english_names(self, date: dt.date, expected: str) -> None:
        assert weekday_name(date) == expected


class TestFormatHour:
    @pytest.mark.parametrize(("hour", "expected"), [(0, "00:00"), (9, "09:00"), (20, "20:00")])
    def test_zero_padded(self, hour: int, expected: str) -> None:
        assert format_hour(hour) == expected


class TestResolveTimezone:
    def test_valid_name(self) -> None:
        assert resolve_timezone("Asia/Kolkata") == ZoneInfo("Asia/Kolkata")

    def test_invalid_name_falls_back_to_utc(self, warnings_logged: list[str]) -> None:
        assert resolve_timezone("Mars/Olympus") is dt.timezone.utc
        assert warnings_logged


class TestLocalNow:
    def test_is_timezone_aware(self) -> None:
        assert local_now().tzinfo is not None
        assert local_now(dt.timezone.utc).utcoffset() == dt.timedelta(0)
