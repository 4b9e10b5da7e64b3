"""Availability results: typed time ranges and the per-day outcome."""

import enum
from dataclasses import dataclass, field
from datetime import date

from venuebook.core.times import format_minutes, minutes_to_hours
from venuebook.models.booking import ExistingBooking
from venuebook.models.schedule import Window


class RangeStatus(str, enum.Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    COOLDOWN = "cooldown"
    NOT_BOOKABLE = "notBookable"  # Free, but too short for the minimum booking


class DayStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"            # Blocked date/weekday, outside listing span, or malformed hours
    NO_SCHEDULE = "no_schedule"  # Caller supplied no schedule; never defaulted


@dataclass(frozen=True)
class TimeRange:
    """Half-open interval [start, end) in minutes since midnight."""

    start: int
    end: int
    status: RangeStatus
    booking: ExistingBooking | None = None
    is_past: bool = False
    is_partially_past: bool = False

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
    def booking_ref(self) -> int | str | None:
        if self.booking is None:
            return None
        return self.booking.booking_id if self.booking.booking_id is not None else self.booking.unique_request_id


@dataclass(frozen=True)
class DayAvailability:
    date: date
    status: DayStatus
    window: Window | None = None
    ranges: list[TimeRange] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    occupancy_percentage: int = 0
