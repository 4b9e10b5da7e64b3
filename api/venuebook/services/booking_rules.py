"""Booking rules enforcement.

All time-slot validation for new booking requests lives here, separate from
the route handlers. Each rule returns a BookingViolation or None if the rule
passes. validate_time_slots() runs all rules and collects violations.

Requests are checked against *approved* bookings only, so several pending
requests may compete for the same hours until one of them is approved.
"""

from collections.abc import Iterable

from venuebook.core.times import format_minutes
from venuebook.models.booking import COMPETING_STATUSES, BookingRequest, RequestStatus, TimeSlot
from venuebook.models.schedule import WeeklySchedule
from venuebook.services.clock import TimezoneClock, business_clock
from venuebook.services.operating_hours import resolve_window
from venuebook.services.past_time import cutoff_hour


class BookingViolation(Exception):
    """Raised when a booking rule is violated."""

    def __init__(self, rule: str, message: str):
        self.rule = rule
        self.message = message
        super().__init__(message)


def _fmt_duration(minutes: int) -> str:
    """Format minutes as hours when evenly divisible by 60, otherwise minutes.

    120 -> "2 hours", 60 -> "1 hour", 90 -> "90 minutes", 0 -> "0 minutes"
    """
    if minutes == 0:
        return "0 minutes"
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour{'s' if hours != 1 else ''}"
    return f"{minutes} minutes"


def validate_time_slots(
    slots: Iterable[TimeSlot],
    schedule: WeeklySchedule,
    existing: Iterable[BookingRequest],
    clock: TimezoneClock = business_clock,
) -> list[BookingViolation]:
    """Run all rules over every requested slot and return the violations (empty = valid)."""
    approved = [b for b in existing if b.status == RequestStatus.APPROVED]
    violations: list[BookingViolation] = []

    for slot in slots:
        # A slot with unusable times cannot be checked any further
        v = check_slot_times(slot)
        if v:
            violations.append(v)
            continue

        for rule in (
            check_not_in_past(slot, clock),
            check_opening_hours(slot, schedule),
            check_minimum_duration(slot, schedule),
            check_approved_conflict(slot, approved, schedule.cooldown_minutes),
        ):
            if rule:
                violations.append(rule)

    return violations


def check_slot_times(slot: TimeSlot) -> BookingViolation | None:
    """Times must parse and the slot must end after it starts."""
    try:
        start, end = slot.start, slot.end
    except ValueError:
        return BookingViolation("invalid_time", f"Unreadable time in slot {slot.start_time}-{slot.end_time}.")
    if end <= start:
        return BookingViolation("invalid_time", f"Slot on {slot.date} must end after it starts.")
    return None


def check_not_in_past(slot: TimeSlot, clock: TimezoneClock = business_clock) -> BookingViolation | None:
    """Cannot book a past date, or today before the next full hour (business time)."""
    now = clock.now()
    if slot.date < now.date():
        return BookingViolation("past_date", f"Cannot book for past date {slot.date} (Tashkent time).")

    if slot.date == now.date():
        earliest = cutoff_hour(now) * 60
        if slot.start < earliest:
            return BookingViolation(
                "past_time",
                f"Cannot book {slot.start_time} on {slot.date}: the earliest start today is {format_minutes(earliest)}.",
            )
    return None


def check_opening_hours(slot: TimeSlot, schedule: WeeklySchedule) -> BookingViolation | None:
    """The venue must be open that day and the slot must sit inside its hours."""
    window = resolve_window(schedule, slot.date)
    if window is None:
        return BookingViolation("closed", f"The venue is closed on {slot.date}.")
    if slot.start < window.start or slot.end > window.end:
        return BookingViolation(
            "outside_hours",
            f"Slot {slot.start_time}-{slot.end_time} is outside opening hours {window} on {slot.date}.",
        )
    return None


def check_minimum_duration(slot: TimeSlot, schedule: WeeklySchedule) -> BookingViolation | None:
    """Every slot must last at least the venue's minimum booking."""
    duration = slot.end - slot.start
    if duration < schedule.minimum_minutes:
        return BookingViolation(
            "minimum_duration",
            f"Slot on {slot.date} lasts {_fmt_duration(duration)}. "
            f"Minimum booking is {_fmt_duration(schedule.minimum_minutes)}.",
        )
    return None


def check_approved_conflict(
    slot: TimeSlot,
    approved: Iterable[BookingRequest],
    cooldown_minutes: int = 0,
) -> BookingViolation | None:
    """No slot may overlap an approved booking or the cooldown after it."""
    for booking in approved:
        for booked in booking.time_slots:
            if has_time_slot_conflict(slot, booked, cooldown_minutes):
                return BookingViolation(
                    "time_conflict",
                    f"Slot {slot.start_time}-{slot.end_time} on {slot.date} conflicts with confirmed booking "
                    f"{booked.start_time}-{booked.end_time}"
                    + (f" and its {_fmt_duration(cooldown_minutes)} cooldown." if cooldown_minutes else "."),
                )
    return None


def has_time_slot_conflict(slot: TimeSlot, booked: TimeSlot, cooldown_minutes: int = 0) -> bool:
    """Same date, and slot overlaps [booked.start, booked.end + cooldown).

    Half-open: a slot starting exactly when the cooldown ends does not conflict.
    """
    if slot.date != booked.date:
        return False
    return slot.start < booked.end + cooldown_minutes and slot.end > booked.start


def find_conflicting_bookings(
    approved: BookingRequest,
    pending: Iterable[BookingRequest],
    cooldown_minutes: int = 0,
) -> list[BookingRequest]:
    """Requests that can no longer go ahead once `approved` is approved."""
    return [
        request
        for request in pending
        if request is not approved
        and not (approved.booking_id is not None and request.booking_id == approved.booking_id)
        and any(
            has_time_slot_conflict(slot, booked, cooldown_minutes)
            for slot in request.time_slots
            for booked in approved.time_slots
        )
    ]


def find_competing_bookings(
    slots: Iterable[TimeSlot],
    candidates: Iterable[BookingRequest],
    exclude_id: int | str | None = None,
) -> list[BookingRequest]:
    """Pending or selected requests asking for any of the same hours (cooldown ignored)."""
    slots = list(slots)
    return [
        request
        for request in candidates
        if request.status in COMPETING_STATUSES
        and (exclude_id is None or request.booking_id != exclude_id)
        and any(has_time_slot_conflict(own, target) for own in request.time_slots for target in slots)
    ]


def is_booking_expired(request: BookingRequest, clock: TimezoneClock = business_clock) -> bool:
    """A pending/selected request whose every slot has already ended."""
    if request.status not in COMPETING_STATUSES or not request.time_slots:
        return False
    return all(
        clock.is_date_in_past(slot.date) or clock.is_time_in_past(slot.date, slot.end_time)
        for slot in request.time_slots
    )
