"""Day availability: resolve the window, partition it, then apply the clock.

This is the single entry point the API uses for one venue and one date. The
venue search filter (is the venue open and free on all of these dates) lives
here too.
"""

import enum
import logging
from collections.abc import Iterable
from datetime import date

from venuebook.models.availability import DayAvailability, DayStatus
from venuebook.models.booking import BookingRequest, ExistingBooking, RequestStatus, TimeSlot
from venuebook.models.schedule import WeeklySchedule
from venuebook.services.booking_rules import has_time_slot_conflict
from venuebook.services.clock import TimezoneClock, business_clock
from venuebook.services.operating_hours import resolve_window
from venuebook.services.past_time import annotate_past, bookable_ranges
from venuebook.services.slots import occupancy_percentage, partition, split_bookings

logger = logging.getLogger(__name__)


class Purpose(str, enum.Enum):
    DISPLAY = "display"  # Hosts/agents: every range, past ones flagged
    BOOKING = "booking"  # Clients: past ranges removed


def day_availability(
    schedule: WeeklySchedule | None,
    query_date: date,
    bookings: Iterable[ExistingBooking],
    clock: TimezoneClock = business_clock,
    purpose: Purpose = Purpose.DISPLAY,
) -> DayAvailability:
    """Compute the typed ranges for one date.

    Without a schedule the result is NO_SCHEDULE; no default hours are guessed.
    Bookings on other dates are ignored. Bookings that cannot be placed are
    reported in `warnings` and left out of the ranges.
    """
    if schedule is None:
        return DayAvailability(date=query_date, status=DayStatus.NO_SCHEDULE)

    window = resolve_window(schedule, query_date)
    if window is None:
        return DayAvailability(date=query_date, status=DayStatus.CLOSED)

    kept, warnings = split_bookings(window, [b for b in bookings if b.date == query_date])
    for warning in warnings:
        logger.warning("%s (%s)", warning, query_date)

    ranges = partition(window, kept, schedule.cooldown_minutes, schedule.minimum_booking_hours)
    occupancy = occupancy_percentage(ranges, window)

    if purpose == Purpose.BOOKING:
        ranges = bookable_ranges(ranges, query_date, schedule.minimum_booking_hours, clock)
    else:
        ranges = annotate_past(ranges, query_date, clock)

    return DayAvailability(
        date=query_date,
        status=DayStatus.OPEN,
        window=window,
        ranges=ranges,
        warnings=warnings,
        occupancy_percentage=occupancy,
    )


def is_venue_available(
    schedule: WeeklySchedule,
    dates: Iterable[date],
    requests: Iterable[BookingRequest],
    start_time: str | None = None,
    end_time: str | None = None,
    clock: TimezoneClock = business_clock,
) -> bool:
    """Whether a venue can be offered in search results for every requested date.

    Past dates are ignored. Each remaining date must resolve to an open window.
    With a time range, the range must also fit that window and stay clear of
    approved bookings and their cooldown. Pending requests never exclude a venue.
    """
    has_time_range = bool(start_time and end_time)
    approved = [r for r in requests if r.status == RequestStatus.APPROVED]
    for day in dates:
        if clock.is_date_in_past(day):
            continue

        window = resolve_window(schedule, day)
        if window is None:
            return False
        if not has_time_range:
            continue

        slot = TimeSlot(day, start_time, end_time)
        if slot.start < window.start or slot.end > window.end:
            return False
        if any(
            has_time_slot_conflict(slot, booked, schedule.cooldown_minutes)
            for request in approved
            for booked in request.time_slots
        ):
            return False

    return True


def filter_available_venues(
    venues: Iterable[tuple[int | str, WeeklySchedule, Iterable[BookingRequest]]],
    dates: Iterable[date],
    start_time: str | None = None,
    end_time: str | None = None,
    clock: TimezoneClock = business_clock,
) -> list[int | str]:
    """Ids of the venues available on all dates, in the order given."""
    dates = list(dates)
    available = []
    for venue_id, schedule, requests in venues:
        if is_venue_available(schedule, dates, requests, start_time, end_time, clock):
            available.append(venue_id)
        else:
            logger.debug("Venue %s unavailable for %s", venue_id, ", ".join(d.isoformat() for d in dates))
    return available
