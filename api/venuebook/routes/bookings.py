"""Booking request routes: slot validation, competition, conflicts and priority.

Called by the booking-creation endpoint before it commits a request, and by
the host/agent views that compare competing requests. Stateless.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from venuebook.core.dependencies import get_clock
from venuebook.schemas import (
    BookingIdsOut,
    CompetingQuery,
    ConflictingQuery,
    PriorityOut,
    PriorityQuery,
    ValidateQuery,
    ValidationOut,
)
from venuebook.services.booking_rules import (
    find_competing_bookings,
    find_conflicting_bookings,
    is_booking_expired,
    validate_time_slots,
)
from venuebook.services.clock import TimezoneClock
from venuebook.services.priority import rank_priority

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("/validate", response_model=ValidationOut)
async def validate_booking(body: ValidateQuery, clock: TimezoneClock = Depends(get_clock)):
    # Callers re-run this against freshly loaded bookings right before committing;
    # the write itself still has to be serialised by storage.
    violations = validate_time_slots(
        [s.to_slot() for s in body.time_slots],
        body.schedule.to_schedule(),
        [r.to_request() for r in body.existing],
        clock=clock,
    )

    if violations:
        logger.info("Rejected booking request: %s", ", ".join(v.rule for v in violations))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[{"rule": v.rule, "message": v.message} for v in violations],
        )

    return ValidationOut(is_valid=True)


@router.post("/priority", response_model=PriorityOut)
async def get_priority(body: PriorityQuery):
    result = rank_priority(body.candidate.to_request(), [c.to_request() for c in body.competitors])
    return PriorityOut.model_validate(result)


@router.post("/competing", response_model=BookingIdsOut)
async def get_competing(body: CompetingQuery, clock: TimezoneClock = Depends(get_clock)):
    """Pending or selected requests for the same hours. Requests whose slots have all ended are left out."""
    competing = find_competing_bookings(
        [s.to_slot() for s in body.time_slots],
        [c.to_request() for c in body.candidates],
        exclude_id=body.exclude_id,
    )
    return BookingIdsOut(booking_ids=[r.booking_id for r in competing if not is_booking_expired(r, clock)])


@router.post("/conflicting", response_model=BookingIdsOut)
async def get_conflicting(body: ConflictingQuery):
    """Requests that can no longer go ahead once `approved` is approved."""
    approved = body.approved.to_request()
    conflicting = find_conflicting_bookings(
        approved,
        [r.to_request() for r in body.pending],
        cooldown_minutes=body.cooldown_minutes,
    )
    if conflicting:
        logger.info("Approving %s conflicts with %d request(s)", approved.booking_id, len(conflicting))
    return BookingIdsOut(booking_ids=[r.booking_id for r in conflicting])
