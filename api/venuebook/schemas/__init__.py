"""Pydantic schemas for API serialisation."""

from datetime import date
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from venuebook.core.config import settings
from venuebook.core.times import format_minutes, parse_minutes
from venuebook.models.availability import DayAvailability, TimeRange
from venuebook.models.booking import BookingRequest, ExistingBooking, RequestStatus, TimeSlot
from venuebook.models.schedule import DayHours, Weekday, WeeklySchedule


def _normalise_time(value: str) -> str:
    """Normalise "9" to "09:00". Anything parse_minutes cannot read is rejected."""
    return format_minutes(parse_minutes(value))


def _normalise_optional_time(value: str) -> str:
    return _normalise_time(value) if value.strip() else ""


TimeOfDay = Annotated[str, AfterValidator(_normalise_time)]
OptionalTimeOfDay = Annotated[str, AfterValidator(_normalise_optional_time)]
WeekdayIndex = Annotated[int, Field(ge=0, le=6)]


# --- Schedule ---


class DayHoursIn(BaseModel):
    start: OptionalTimeOfDay = ""
    end: OptionalTimeOfDay = ""


class ScheduleIn(BaseModel):
    default_window: DayHoursIn = Field(
        default_factory=lambda: DayHoursIn(start=settings.default_open_time, end=settings.default_close_time)
    )
    weekday_overrides: dict[WeekdayIndex, DayHoursIn] = {}
    blocked_weekdays: list[WeekdayIndex] = []
    blocked_dates: list[date] = []
    minimum_booking_hours: float = Field(default=settings.default_minimum_hours, gt=0)
    cooldown_minutes: int = Field(default=settings.default_cooldown_minutes, ge=0)
    available_from: date | None = None
    available_until: date | None = None

    def to_schedule(self) -> WeeklySchedule:
        return WeeklySchedule(
            default_hours=DayHours(self.default_window.start, self.default_window.end),
            weekday_overrides={Weekday(k): DayHours(v.start, v.end) for k, v in self.weekday_overrides.items()},
            blocked_weekdays=frozenset(Weekday(d) for d in self.blocked_weekdays),
            blocked_dates=frozenset(self.blocked_dates),
            minimum_booking_hours=self.minimum_booking_hours,
            cooldown_minutes=self.cooldown_minutes,
            available_from=self.available_from,
            available_until=self.available_until,
        )


class WindowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start_time: str
    end_time: str
    start_hour: float
    end_hour: float


# --- Bookings ---


class TimeSlotIn(BaseModel):
    date: date
    start_time: TimeOfDay
    end_time: TimeOfDay

    def to_slot(self) -> TimeSlot:
        return TimeSlot(self.date, self.start_time, self.end_time)


class BookingIn(TimeSlotIn):
    booking_id: int | str | None = None
    unique_request_id: str | None = None

    def to_booking(self) -> ExistingBooking:
        return ExistingBooking(self.date, self.start_time, self.end_time, self.booking_id, self.unique_request_id)


class BookingRequestIn(BaseModel):
    booking_id: int | str | None = None
    status: RequestStatus = RequestStatus.PENDING
    time_slots: list[TimeSlotIn] = []

    def to_request(self) -> BookingRequest:
        return BookingRequest(self.booking_id, self.status, tuple(s.to_slot() for s in self.time_slots))


# --- Availability ---


class WindowQuery(BaseModel):
    schedule: ScheduleIn | None = None
    date: date


class WindowResultOut(BaseModel):
    date: date
    status: str
    window: WindowOut | None


class DayQuery(WindowQuery):
    bookings: list[BookingIn] = []


class TimeRangeOut(BaseModel):
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"
    start_hour: float
    end_hour: float
    status: str
    booking_id: int | str | None = None
    unique_request_id: str | None = None
    is_past: bool = False
    is_partially_past: bool = False

    @classmethod
    def from_range(cls, r: TimeRange) -> "TimeRangeOut":
        return cls(
            start_time=r.start_time,
            end_time=r.end_time,
            start_hour=r.start_hour,
            end_hour=r.end_hour,
            status=r.status.value,
            booking_id=r.booking.booking_id if r.booking else None,
            unique_request_id=r.booking.unique_request_id if r.booking else None,
            is_past=r.is_past,
            is_partially_past=r.is_partially_past,
        )


class DayAvailabilityOut(BaseModel):
    date: date
    status: str
    window: WindowOut | None
    ranges: list[TimeRangeOut]
    warnings: list[str]
    occupancy_percentage: int

    @classmethod
    def from_day(cls, day: DayAvailability) -> "DayAvailabilityOut":
        return cls(
            date=day.date,
            status=day.status.value,
            window=WindowOut.model_validate(day.window) if day.window else None,
            ranges=[TimeRangeOut.from_range(r) for r in day.ranges],
            warnings=day.warnings,
            occupancy_percentage=day.occupancy_percentage,
        )


class StartCheckQuery(BaseModel):
    date: date
    start_time: TimeOfDay
    bookings: list[BookingIn] = []
    minimum_hours: float = Field(gt=0)
    close_time: TimeOfDay
    open_time: TimeOfDay = "00:00"
    cooldown_minutes: int = Field(default=0, ge=0)


class StartCheckOut(BaseModel):
    is_bookable: bool


class StartOptionsQuery(BaseModel):
    schedule: ScheduleIn
    date: date
    bookings: list[BookingIn] = []
    step_minutes: int = Field(default=60, gt=0)


class EndOptionsQuery(StartOptionsQuery):
    start_time: TimeOfDay


class OptionsOut(BaseModel):
    date: date
    options: list[str]


class DateRangeQuery(BaseModel):
    schedule: ScheduleIn
    start: date
    end: date


class DatesOut(BaseModel):
    dates: list[date]


class VenueIn(BaseModel):
    venue_id: int | str
    schedule: ScheduleIn
    bookings: list[BookingRequestIn] = []  # Only approved requests exclude the venue


class VenueSearchQuery(BaseModel):
    venues: list[VenueIn]
    dates: list[date] = []
    start_time: OptionalTimeOfDay = ""
    end_time: OptionalTimeOfDay = ""


class VenueSearchOut(BaseModel):
    venue_ids: list[int | str]


# --- Booking requests ---


class ValidateQuery(BaseModel):
    schedule: ScheduleIn
    time_slots: list[TimeSlotIn] = Field(min_length=1)
    existing: list[BookingRequestIn] = []


class ValidationOut(BaseModel):
    is_valid: bool


class PriorityQuery(BaseModel):
    candidate: BookingRequestIn
    competitors: list[BookingRequestIn] = []


class PriorityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    has_competitors: bool
    is_highest_hours: bool
    current_hours: float
    competitor_count: int


class CompetingQuery(BaseModel):
    time_slots: list[TimeSlotIn]
    candidates: list[BookingRequestIn] = []
    exclude_id: int | str | None = None


class ConflictingQuery(BaseModel):
    approved: BookingRequestIn
    pending: list[BookingRequestIn] = []
    cooldown_minutes: int = Field(default=settings.default_cooldown_minutes, ge=0)


class BookingIdsOut(BaseModel):
    booking_ids: list[int | str | None]
