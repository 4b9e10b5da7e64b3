"""Flag or drop time ranges that have already elapsed today.

Only "today" in the business timezone is affected; ranges on any other date
pass through unflagged. Once any part of the current hour has passed, the
whole hour is treated as gone: nothing may be booked before the next full
hour.
"""

from dataclasses import replace
from datetime import date, datetime

from venuebook.core.times import hours_to_minutes
from venuebook.models.availability import RangeStatus, TimeRange
from venuebook.services.clock import TimezoneClock, business_clock


def cutoff_hour(now: datetime) -> int:
    """Earliest whole hour still on offer today. 14:00 -> 14, 14:20 -> 15."""
    return now.hour + (1 if now.minute > 0 else 0)


def earliest_start(query_date: date, clock: TimezoneClock = business_clock) -> int | None:
    """First minute a new booking may start on query_date.

    None for a date already past, the cutoff hour today, midnight on later dates.
    """
    now = clock.now()
    if query_date < now.date():
        return None
    if query_date == now.date():
        return cutoff_hour(now) * 60
    return 0


def annotate_past(
    ranges: list[TimeRange],
    query_date: date,
    clock: TimezoneClock = business_clock,
) -> list[TimeRange]:
    """Flag every range for read-only display.

    is_past: the range ended at or before the current time.
    is_partially_past: not yet ended, but it starts before the cutoff hour.
    """
    now = clock.now()
    if query_date != now.date():
        return [replace(r, is_past=False, is_partially_past=False) for r in ranges]

    # is_past follows the actual minute, not the cutoff: a range still running
    # now is never reported as past, only as partially past.
    elapsed = now.hour * 60 + now.minute
    cutoff = cutoff_hour(now) * 60
    return [
        replace(r, is_past=r.end <= elapsed, is_partially_past=r.end > elapsed and r.start < cutoff)
        for r in ranges
    ]


def bookable_ranges(
    ranges: list[TimeRange],
    query_date: date,
    minimum_hours: float,
    clock: TimezoneClock = business_clock,
) -> list[TimeRange]:
    """The booking-flow view of a day: past ranges dropped.

    An available range cut by the cutoff hour stays available only if a
    minimum-length booking still fits between the cutoff and its end.
    """
    annotated = annotate_past(ranges, query_date, clock)
    now = clock.now()
    if query_date != now.date():
        return annotated

    cutoff = cutoff_hour(now) * 60
    minimum_minutes = hours_to_minutes(minimum_hours)
    result = []
    for r in annotated:
        if r.is_past:
            continue
        if r.status == RangeStatus.AVAILABLE and r.start < cutoff and r.end - cutoff < minimum_minutes:
            r = replace(r, status=RangeStatus.NOT_BOOKABLE)
        result.append(r)
    return result
