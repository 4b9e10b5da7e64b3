"""Booking rows as the availability core consumes them.

Bookings arrive already loaded from storage. Nothing here is persisted; these
are read-only views keyed by calendar date and "HH:MM" times.
"""

import enum
from dataclasses import dataclass, field
from datetime import date

from venuebook.core.times import minutes_to_hours, parse_minutes


class RequestStatus(str, enum.Enum):
    PENDING = "pending"      # Awaiting host/agent decision
    SELECTED = "selected"    # Picked by the host among competing requests
    APPROVED = "approved"    # Confirmed, blocks the hours
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# Requests that may still compete for the same hours
COMPETING_STATUSES = frozenset({RequestStatus.PENDING, RequestStatus.SELECTED})


@dataclass(frozen=True)
class TimeSlot:
    date: date
    start_time: str
    end_time: str

    @property
    def start(self) -> int:
        return parse_minutes(self.start_time)

    @property
    def end(self) -> int:
        return parse_minutes(self.end_time)

    @property
    def hours(self) -> float:
        return minutes_to_hours(self.end - self.start)

    def __str__(self) -> str:
        return f"{self.date.isoformat()} {self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class ExistingBooking(TimeSlot):
    """One booked slot on one date, with its display linkage."""

    booking_id: int | str | None = None
    unique_request_id: str | None = None


@dataclass(frozen=True)
class BookingRequest:
    """A booking request spanning one or more dated slots."""

    booking_id: int | str | None
    status: RequestStatus = RequestStatus.PENDING
    time_slots: tuple[TimeSlot, ...] = field(default_factory=tuple)

    @property
    def dates(self) -> set[date]:
        return {slot.date for slot in self.time_slots}


@dataclass(frozen=True)
class PriorityResult:
    has_competitors: bool
    is_highest_hours: bool
    current_hours: float
    competitor_count: int
