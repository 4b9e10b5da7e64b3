"""Booking priority: does a request hold the most hours on a date it competes for?

Advisory only. The result is shown to hosts and agents next to competing
requests; it never blocks, reorders or approves anything.
"""

from collections.abc import Iterable
from datetime import date

from venuebook.models.booking import BookingRequest, PriorityResult, TimeSlot


def total_hours(slots: Iterable[TimeSlot]) -> float:
    return sum(slot.hours for slot in slots)


def hours_for_date(slots: Iterable[TimeSlot], day: date) -> float:
    return total_hours(slot for slot in slots if slot.date == day)


def rank_priority(candidate: BookingRequest, competitors: Iterable[BookingRequest]) -> PriorityResult:
    """Rank a request against the others competing for the same venue.

    Only requests sharing at least one date with the candidate count as
    competitors. The candidate is highest when, on at least one shared date, its
    hours strictly exceed the largest single competitor's hours that date.
    Competitors with no hours on a date are ignored for that date.
    """
    current_hours = total_hours(candidate.time_slots)
    candidate_dates = candidate.dates

    overlapping = [
        c
        for c in competitors
        if not (candidate.booking_id is not None and c.booking_id == candidate.booking_id)
        and c.dates & candidate_dates
    ]

    if not overlapping or current_hours == 0:
        return PriorityResult(
            has_competitors=False,
            is_highest_hours=False,
            current_hours=current_hours,
            competitor_count=0,
        )

    is_highest = False
    for day in sorted(candidate_dates):
        rival_hours = [h for h in (hours_for_date(c.time_slots, day) for c in overlapping) if h > 0]
        if not rival_hours:
            continue
        if hours_for_date(candidate.time_slots, day) > max(rival_hours):
            is_highest = True
            break

    return PriorityResult(
        has_competitors=True,
        is_highest_hours=is_highest,
        current_hours=current_hours,
        competitor_count=len(overlapping),
    )
