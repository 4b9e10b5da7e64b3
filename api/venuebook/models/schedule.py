"""Venue weekly schedule.

A venue opens on a default window, which individual weekdays may override.
Whole weekdays and individual calendar dates can be blocked. Every booking
must last at least the minimum duration, and each booking is followed by a
cooldown taken from the same window.
"""

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime

from venuebook.core.config import settings
from venuebook.core.times import format_minutes, hours_to_minutes, minutes_to_hours, parse_minutes


class Weekday(enum.IntEnum):
    """Day-of-week index as venues store it: 0 = Sunday through 6 = Saturday.

    Note this differs from date.weekday(), where 0 is Monday.
    """

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return cls(day.isoweekday() % 7)


@dataclass(frozen=True)
class DayHours:
    """Open/close times as stored on the venue. Either may be blank."""

    start: str = ""
    end: str = ""

    @property
    def is_set(self) -> bool:
        return bool(str(self.start).strip() and str(self.end).strip())


@dataclass(frozen=True)
class Window:
    """Effective open/close window for one date, in minutes since midnight."""

    start: int
    end: int

    @classmethod
    def from_times(cls, start: str, end: str) -> "Window":
        return cls(parse_minutes(start), parse_minutes(end))

    @property
    def start_hour(self) -> float:
        return minutes_to_hours(self.start)

    @property
    def end_hour(self) -> float:
        return minutes_to_hours(self.end)

    @property
    def start_time(self) -> str:
        return format_minutes(self.start)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end)

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class WeeklySchedule:
    default_hours: DayHours
    weekday_overrides: Mapping[Weekday, DayHours] = field(default_factory=dict)
    blocked_weekdays: frozenset[Weekday] = frozenset()
    blocked_dates: frozenset[date] = frozenset()
    minimum_booking_hours: float = 1
    cooldown_minutes: int = 0
    # Overall listing span; dates outside it are closed
    available_from: date | None = None
    available_until: date | None = None

    def __post_init__(self):
        if self.minimum_booking_hours <= 0:
            raise ValueError("minimum_booking_hours must be positive")
        if self.cooldown_minutes < 0:
            raise ValueError("cooldown_minutes must not be negative")

    @property
    def minimum_minutes(self) -> int:
        return hours_to_minutes(self.minimum_booking_hours)

    @property
    def is_fully_blocked(self) -> bool:
        """True when every weekday is blocked, i.e. the venue has no capacity at all."""
        return len(set(self.blocked_weekdays)) == len(Weekday)

    @classmethod
    def from_mapping(cls, data: Mapping) -> "WeeklySchedule":
        """Build a schedule from the stored venue shape.

        Keys: checkIn, checkOut, weekdayTimeSlots ({"0": {"start", "end"}, ...}),
        blockedWeekdays, blockedDates, minimumHours, cooldown, startDate, endDate.
        Blank or missing values fall back to the configured defaults.
        """
        overrides = {}
        for key, hours in (data.get("weekdayTimeSlots") or {}).items():
            hours = hours or {}
            overrides[Weekday(int(key))] = DayHours(hours.get("start") or "", hours.get("end") or "")

        return cls(
            default_hours=DayHours(
                data.get("checkIn") or settings.default_open_time,
                data.get("checkOut") or settings.default_close_time,
            ),
            weekday_overrides=overrides,
            blocked_weekdays=frozenset(Weekday(int(d)) for d in data.get("blockedWeekdays") or []),
            blocked_dates=frozenset(_as_date(d) for d in data.get("blockedDates") or []),
            minimum_booking_hours=data.get("minimumHours") or settings.default_minimum_hours,
            cooldown_minutes=data.get("cooldown") or settings.default_cooldown_minutes,
            available_from=_as_date(data["startDate"]) if data.get("startDate") else None,
            available_until=_as_date(data["endDate"]) if data.get("endDate") else None,
        )


def _as_date(value) -> date:
    """Accept a date or an ISO string, ignoring any time part ("2025-08-01T00:00:00Z")."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
