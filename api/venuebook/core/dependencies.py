"""FastAPI dependencies for injection into route handlers."""

from venuebook.services.clock import TimezoneClock, business_clock


def get_clock() -> TimezoneClock:
    """The business-timezone clock. Tests override this with a FixedClock."""
    return business_clock
