"""Operating hours: the effective open/close window for a concrete date.

Pure calculation module. No FastAPI dependencies.
Dates are plain calendar dates; the weekday is taken from the date itself and
never re-derived through a UTC conversion, which would shift it by a day.
"""

import logging
from datetime import date, timedelta

from venuebook.models.schedule import Weekday, WeeklySchedule, Window
from venuebook.services.clock import TimezoneClock, business_clock

logger = logging.getLogger(__name__)


def is_closed_date(schedule: WeeklySchedule, query_date: date) -> bool:
    """Blocked date, blocked weekday, or outside the venue's listing span."""
    if schedule.available_from and query_date < schedule.available_from:
        return True
    if schedule.available_until and query_date > schedule.available_until:
        return True
    if query_date in schedule.blocked_dates:
        return True
    return Weekday.of(query_date) in schedule.blocked_weekdays


def resolve_window(schedule: WeeklySchedule, query_date: date) -> Window | None:
    """Return the open/close window for query_date, or None when the venue is closed.

    A weekday override is used only when both its start and end are filled in;
    otherwise the default hours apply. Hours that do not parse, or that open at
    or after closing, close the day instead of failing.
    """
    if is_closed_date(schedule, query_date):
        return None

    weekday = Weekday.of(query_date)
    override = schedule.weekday_overrides.get(weekday)
    hours = override if override is not None and override.is_set else schedule.default_hours

    try:
        window = Window.from_times(hours.start, hours.end)
    except ValueError:
        logger.warning("Unreadable hours %r-%r for %s, treating as closed", hours.start, hours.end, weekday.name)
        return None

    if window.start >= window.end:
        logger.warning("Hours %s for %s open at or after closing, treating as closed", window, weekday.name)
        return None

    logger.debug("Resolved %s (%s) to %s", query_date, weekday.name, window)
    return window


def available_dates(
    schedule: WeeklySchedule,
    start: date,
    end: date,
    clock: TimezoneClock = business_clock,
) -> list[date]:
    """Every date in [start, end] that is not past and on which the venue is open."""
    if schedule.is_fully_blocked:
        return []
    today = clock.today()
    dates: list[date] = []
    current = start
    while current <= end:
        if current >= today and resolve_window(schedule, current) is not None:
            dates.append(current)
        current += timedelta(days=1)
    return dates
