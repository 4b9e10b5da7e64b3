"""Slot partitioning: turn one day's window and bookings into typed time ranges.

Pure calculation module. All arithmetic is in minutes since midnight; the
returned ranges are contiguous, do not overlap, and cover the whole window.

A booking blocks [start, end) and, when the venue has a cooldown, the
following [end, end + cooldown) as well. A cooldown is cut short by the next
booking or by closing time. Intervals are half-open, so a start exactly at
the end of a cooldown is allowed.
"""

import logging
from collections.abc import Iterable
from datetime import date

from venuebook.core.times import format_minutes, hours_to_minutes, parse_minutes
from venuebook.models.availability import RangeStatus, TimeRange
from venuebook.models.booking import ExistingBooking
from venuebook.models.schedule import Window

logger = logging.getLogger(__name__)


def _describe(booking: ExistingBooking) -> str:
    ref = booking.booking_id if booking.booking_id is not None else booking.unique_request_id
    label = f"booking {ref}" if ref is not None else "booking"
    return f"{label} {booking.start_time}-{booking.end_time}"


def _intervals(bookings: Iterable[ExistingBooking]) -> list[tuple[int, int]]:
    """(start, end) minutes of every readable, non-inverted booking."""
    intervals = []
    for booking in bookings:
        try:
            start, end = booking.start, booking.end
        except ValueError:
            continue
        if start < end:
            intervals.append((start, end))
    return intervals


def split_bookings(window: Window, bookings: Iterable[ExistingBooking]) -> tuple[list[ExistingBooking], list[str]]:
    """Sort bookings by start and set aside the ones that cannot be placed.

    Returns (kept, warnings). A booking is set aside when its times do not
    parse, when it starts at or after its end, when it falls outside the
    window, or when it overlaps a booking already kept.
    """
    readable: list[tuple[int, int, ExistingBooking]] = []
    warnings: list[str] = []

    for booking in bookings:
        try:
            readable.append((booking.start, booking.end, booking))
        except ValueError:
            warnings.append(f"Skipped {_describe(booking)}: unreadable time")

    kept: list[ExistingBooking] = []
    last_end = None
    for start, end, booking in sorted(readable, key=lambda item: (item[0], item[1])):
        if start >= end:
            warnings.append(f"Skipped {_describe(booking)}: starts at or after it ends")
        elif start < window.start or end > window.end:
            warnings.append(f"Skipped {_describe(booking)}: outside opening hours {window}")
        elif last_end is not None and start < last_end:
            warnings.append(f"Skipped {_describe(booking)}: overlaps an earlier booking")
        else:
            kept.append(booking)
            last_end = end

    return kept, warnings


def _start_fits(
    start: int,
    window: Window,
    intervals: list[tuple[int, int]],
    minimum_minutes: int,
    cooldown_minutes: int,
) -> bool:
    if start < window.start or start + minimum_minutes > window.end:
        return False
    for b_start, b_end in intervals:
        # Inside the booking or its trailing cooldown
        if b_start <= start < b_end + cooldown_minutes:
            return False
        # The minimum-length booking would run into it
        if start < b_end and start + minimum_minutes > b_start:
            return False
    return True


def is_valid_start_in_window(
    start: int,
    window: Window,
    bookings: Iterable[ExistingBooking],
    minimum_hours: float,
    cooldown_minutes: int = 0,
) -> bool:
    """Whether a booking of the minimum length can start at `start` (minutes)."""
    return _start_fits(start, window, _intervals(bookings), hours_to_minutes(minimum_hours), cooldown_minutes)


def is_valid_start(
    start_time: str,
    bookings: Iterable[ExistingBooking],
    minimum_hours: float,
    close_time: str,
    cooldown_minutes: int = 0,
    open_time: str = "00:00",
    on_date: date | None = None,
) -> bool:
    """Check a prospective start time against closing time, bookings and cooldown.

    Only guarantees that the *minimum* booking fits; a longer booking still has
    to be checked with is_range_available. When on_date is given, bookings on
    other dates are ignored.
    """
    if on_date is not None:
        bookings = [b for b in bookings if b.date == on_date]
    try:
        start = parse_minutes(start_time)
        window = Window.from_times(open_time, close_time)
    except ValueError:
        return False
    return is_valid_start_in_window(start, window, bookings, minimum_hours, cooldown_minutes)


def is_range_available(
    start: int,
    end: int,
    bookings: Iterable[ExistingBooking],
    cooldown_minutes: int = 0,
) -> bool:
    """Whether [start, end) stays clear of every booking and its trailing cooldown."""
    if start >= end:
        return False
    return not any(
        start < b_end + cooldown_minutes and end > b_start for b_start, b_end in _intervals(bookings)
    )


def partition(
    window: Window | None,
    bookings: Iterable[ExistingBooking],
    cooldown_minutes: int,
    minimum_hours: float,
) -> list[TimeRange]:
    """Partition the window into available / booked / cooldown / notBookable ranges.

    A free gap is available when a minimum-length booking may start at its
    beginning, otherwise notBookable. A closed day (window None) has no ranges.
    Bookings that cannot be placed are skipped and logged.
    """
    if window is None:
        return []

    kept, warnings = split_bookings(window, bookings)
    for warning in warnings:
        logger.warning(warning)

    minimum_minutes = hours_to_minutes(minimum_hours)
    intervals = [(b.start, b.end) for b in kept]

    def gap(start: int, end: int) -> TimeRange:
        fits = _start_fits(start, window, intervals, minimum_minutes, cooldown_minutes)
        return TimeRange(start, end, RangeStatus.AVAILABLE if fits else RangeStatus.NOT_BOOKABLE)

    ranges: list[TimeRange] = []
    cursor = window.start

    for index, booking in enumerate(kept):
        b_start, b_end = intervals[index]
        if cursor < b_start:
            ranges.append(gap(cursor, b_start))

        ranges.append(TimeRange(b_start, b_end, RangeStatus.BOOKED, booking=booking))

        if cooldown_minutes > 0:
            next_start = intervals[index + 1][0] if index + 1 < len(intervals) else window.end
            cooldown_end = min(b_end + cooldown_minutes, window.end, next_start)
            if cooldown_end > b_end:
                ranges.append(TimeRange(b_end, cooldown_end, RangeStatus.COOLDOWN))

        cursor = max(cursor, b_end + cooldown_minutes)

    if cursor < window.end:
        ranges.append(gap(cursor, window.end))

    logger.debug("Partitioned %s into %d ranges (%d bookings)", window, len(ranges), len(kept))
    return ranges


def valid_start_options(
    window: Window,
    bookings: Iterable[ExistingBooking],
    minimum_hours: float,
    cooldown_minutes: int = 0,
    step_minutes: int = 60,
    earliest_minutes: int = 0,
) -> list[str]:
    """Start times on a step grid from opening where a minimum booking fits.

    Grid times before earliest_minutes (the cutoff hour today) are left out.
    """
    intervals = _intervals(bookings)
    minimum_minutes = hours_to_minutes(minimum_hours)
    return [
        format_minutes(start)
        for start in range(window.start, window.end, step_minutes)
        if start >= earliest_minutes and _start_fits(start, window, intervals, minimum_minutes, cooldown_minutes)
    ]


def valid_end_options(
    window: Window,
    start_time: str,
    bookings: Iterable[ExistingBooking],
    minimum_hours: float,
    cooldown_minutes: int = 0,
    step_minutes: int = 60,
    earliest_minutes: int = 0,
) -> list[str]:
    """End times for a booking starting at start_time, shortest first.

    Begins at start + minimum and stops at the first end that would run into a
    booking, its cooldown, or closing time. A start before earliest_minutes has
    no end options.
    """
    bookings = list(bookings)
    start = parse_minutes(start_time)
    if start < earliest_minutes:
        return []
    if not is_valid_start_in_window(start, window, bookings, minimum_hours, cooldown_minutes):
        return []

    options = []
    for end in range(start + hours_to_minutes(minimum_hours), window.end + 1, step_minutes):
        if not is_range_available(start, end, bookings, cooldown_minutes):
            break
        options.append(format_minutes(end))
    return options


def occupancy_percentage(ranges: list[TimeRange], window: Window | None) -> int:
    """Share of the window (0-100) that can no longer be booked.

    Booked and cooldown time counts, as do gaps too short for a minimum booking
    before the next booking. A short gap that runs to closing time does not.
    """
    if window is None or window.duration_minutes <= 0:
        return 0
    occupied = sum(
        r.end - r.start
        for r in ranges
        if r.status in (RangeStatus.BOOKED, RangeStatus.COOLDOWN)
        or (r.status == RangeStatus.NOT_BOOKABLE and r.end < window.end)
    )
    return round(occupied * 100 / window.duration_minutes)
