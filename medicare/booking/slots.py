"""Bookable time-of-day slots for a doctor on a calendar date.

Slots are whole hours. A doctor's weekly availability windows decide the
range; a doctor without windows is bookable during default business hours.
On the current day, the current hour and every earlier hour are excluded so
that a booking always lands in a future hour.
"""

import datetime as dt
from typing import Sequence

from loguru import logger

from medicare.booking.datetime_helpers import format_hour, local_now, weekday_name
from medicare.domain.models import AppointmentType, AvailabilityWindow, Doctor

DEFAULT_FIRST_HOUR = 9
DEFAULT_LAST_HOUR = 20


def _window_for_day(
    windows: Sequence[AvailabilityWindow], day: str
) -> AvailabilityWindow | None:
    for window in windows:
        if window.day != day or not window.is_available:
            continue
        if not window.is_valid:
            logger.warning(
                "Ignoring availability window on {} with start {} not before end {}",
                window.day,
                window.start_time,
                window.end_time,
            )
            continue
        return window
    return None


def available_slots(
    windows: Sequence[AvailabilityWindow] | None,
    selected_date: dt.date | None,
    *,
    now: dt.datetime | None = None,
) -> list[str]:
    """Return the ordered ``HH:00`` slots bookable on ``selected_date``.

    Args:
        windows: The doctor's weekly availability, or None/empty to use the
            default 09:00-20:00 range.
        selected_date: The calendar day being booked; None yields no slots.
        now: The current local time. Defaults to the system clock.
    """
    if selected_date is None:
        return []

    if windows:
        window = _window_for_day(windows, weekday_name(selected_date))
        if window is None:
            return []
        hours = range(window.start_time.hour, window.end_time.hour)
    else:
        hours = range(DEFAULT_FIRST_HOUR, DEFAULT_LAST_HOUR + 1)

    now = now or local_now()
    if selected_date == now.date():
        hours = range(max(hours.start, now.hour + 1), hours.stop)

    return [format_hour(hour) for hour in hours]


def slots_for_draft(
    appointment_type: AppointmentType,
    doctor: Doctor | None,
    selected_date: dt.date | None,
    *,
    now: dt.datetime | None = None,
) -> list[str]:
    """Slots offered by the booking form.

    A consultation needs a selected doctor and follows their availability.
    A test is not tied to a doctor and always uses the default range.
    """
    if appointment_type is AppointmentType.TEST:
        return available_slots(None, selected_date, now=now)
    if doctor is None:
        return []
    return available_slots(doctor.available_slots, selected_date, now=now)
