"""Domain value types for the availability core."""

from venuebook.models.availability import DayAvailability, DayStatus, RangeStatus, TimeRange
from venuebook.models.booking import (
    COMPETING_STATUSES,
    BookingRequest,
    ExistingBooking,
    PriorityResult,
    RequestStatus,
    TimeSlot,
)
from venuebook.models.schedule import DayHours, Weekday, WeeklySchedule, Window

__all__ = [
    "BookingRequest",
    "COMPETING_STATUSES",
    "DayAvailability",
    "DayHours",
    "DayStatus",
    "ExistingBooking",
    "PriorityResult",
    "RangeStatus",
    "RequestStatus",
    "TimeRange",
    "TimeSlot",
    "Weekday",
    "WeeklySchedule",
    "Window",
]
