"""Availability routes: window, day ranges, start/end options, open dates, venue search.

Stateless: the venue schedule and its already-loaded bookings arrive in the
request body. Nothing is read from or written to storage here.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from venuebook.core.dependencies import get_clock
from venuebook.core.times import parse_minutes
from venuebook.models.availability import DayStatus
from venuebook.schemas import (
    DateRangeQuery,
    DatesOut,
    DayAvailabilityOut,
    DayQuery,
    EndOptionsQuery,
    OptionsOut,
    StartCheckOut,
    StartCheckQuery,
    StartOptionsQuery,
    VenueSearchOut,
    VenueSearchQuery,
    WindowOut,
    WindowQuery,
    WindowResultOut,
)
from venuebook.services.availability import Purpose, day_availability, filter_available_venues
from venuebook.services.clock import TimezoneClock
from venuebook.services.operating_hours import available_dates, resolve_window
from venuebook.services.past_time import earliest_start
from venuebook.services.slots import is_valid_start, valid_end_options, valid_start_options

router = APIRouter(prefix="/availability", tags=["availability"])

MAX_DATE_RANGE_DAYS = 366


@router.post("/window", response_model=WindowResultOut)
async def get_window(body: WindowQuery):
    if body.schedule is None:
        return WindowResultOut(date=body.date, status=DayStatus.NO_SCHEDULE.value, window=None)

    window = resolve_window(body.schedule.to_schedule(), body.date)
    if window is None:
        return WindowResultOut(date=body.date, status=DayStatus.CLOSED.value, window=None)
    return WindowResultOut(date=body.date, status=DayStatus.OPEN.value, window=WindowOut.model_validate(window))


@router.post("/day", response_model=DayAvailabilityOut)
async def get_day(
    body: DayQuery,
    purpose: Purpose = Query(Purpose.DISPLAY, description="display: all ranges flagged; booking: past ranges removed"),
    clock: TimezoneClock = Depends(get_clock),
):
    """Return the typed ranges for one venue on one date.

    Used by the host/agent calendar (display) and the client booking form (booking).
    """
    schedule = body.schedule.to_schedule() if body.schedule else None
    day = day_availability(
        schedule,
        body.date,
        [b.to_booking() for b in body.bookings],
        clock=clock,
        purpose=purpose,
    )
    return DayAvailabilityOut.from_day(day)


@router.post("/start-check", response_model=StartCheckOut)
async def check_start(body: StartCheckQuery):
    bookable = is_valid_start(
        body.start_time,
        [b.to_booking() for b in body.bookings],
        minimum_hours=body.minimum_hours,
        close_time=body.close_time,
        cooldown_minutes=body.cooldown_minutes,
        open_time=body.open_time,
        on_date=body.date,
    )
    return StartCheckOut(is_bookable=bookable)


@router.post("/start-options", response_model=OptionsOut)
async def get_start_options(body: StartOptionsQuery, clock: TimezoneClock = Depends(get_clock)):
    """Start times for the booking form. Today, nothing before the next full hour is offered."""
    schedule = body.schedule.to_schedule()
    window = resolve_window(schedule, body.date)
    earliest = earliest_start(body.date, clock)
    if window is None or earliest is None:
        return OptionsOut(date=body.date, options=[])

    bookings = [b.to_booking() for b in body.bookings if b.date == body.date]
    options = valid_start_options(
        window,
        bookings,
        schedule.minimum_booking_hours,
        schedule.cooldown_minutes,
        body.step_minutes,
        earliest_minutes=earliest,
    )
    return OptionsOut(date=body.date, options=options)


@router.post("/end-options", response_model=OptionsOut)
async def get_end_options(body: EndOptionsQuery, clock: TimezoneClock = Depends(get_clock)):
    schedule = body.schedule.to_schedule()
    window = resolve_window(schedule, body.date)
    earliest = earliest_start(body.date, clock)
    if window is None or earliest is None:
        return OptionsOut(date=body.date, options=[])

    bookings = [b.to_booking() for b in body.bookings if b.date == body.date]
    options = valid_end_options(
        window,
        body.start_time,
        bookings,
        schedule.minimum_booking_hours,
        schedule.cooldown_minutes,
        body.step_minutes,
        earliest_minutes=earliest,
    )
    return OptionsOut(date=body.date, options=options)


@router.post("/dates", response_model=DatesOut)
async def get_open_dates(body: DateRangeQuery, clock: TimezoneClock = Depends(get_clock)):
    if body.end < body.start:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="end must not be before start")
    if (body.end - body.start).days > MAX_DATE_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Date range cannot exceed {MAX_DATE_RANGE_DAYS} days",
        )
    return DatesOut(dates=available_dates(body.schedule.to_schedule(), body.start, body.end, clock))


@router.post("/venues", response_model=VenueSearchOut)
async def search_venues(body: VenueSearchQuery, clock: TimezoneClock = Depends(get_clock)):
    """Filter venue search results down to the venues open and free on every requested date."""
    if bool(body.start_time) != bool(body.end_time):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start_time and end_time must be given together",
        )
    if body.start_time and parse_minutes(body.end_time) <= parse_minutes(body.start_time):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="end_time must be after start_time")

    venue_ids = filter_available_venues(
        [(v.venue_id, v.schedule.to_schedule(), [b.to_request() for b in v.bookings]) for v in body.venues],
        body.dates,
        start_time=body.start_time or None,
        end_time=body.end_time or None,
        clock=clock,
    )
    return VenueSearchOut(venue_ids=venue_ids)
