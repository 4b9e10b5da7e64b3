"""Business-timezone clock.

Every booking-day boundary and "has this already happened" check is made in
the venue's business timezone (Asia/Tashkent, UTC+5, no DST), whatever the
timezone of the server or of the client that sent the request.
"""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from venuebook.core.config import settings
from venuebook.core.times import parse_minutes

BUSINESS_TZ = ZoneInfo(settings.business_timezone)


class TimezoneClock:
    """Reads the system clock and expresses it in the business timezone."""

    def __init__(self, tz: ZoneInfo = BUSINESS_TZ):
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()

    def is_date_in_past(self, day: date) -> bool:
        """True when day is strictly before today (business calendar)."""
        return day < self.today()

    def is_time_in_past(self, day: date, time_of_day: str) -> bool:
        """True when day at time_of_day (business wall clock) is before now."""
        minutes = parse_minutes(time_of_day)
        target = datetime.combine(day, time(0, 0), tzinfo=self.tz)
        return target + timedelta(minutes=minutes) < self.now()


class FixedClock(TimezoneClock):
    """A clock frozen at one instant. Naive instants are read as business-local."""

    def __init__(self, instant: datetime, tz: ZoneInfo = BUSINESS_TZ):
        super().__init__(tz)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=tz)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant.astimezone(self.tz)


business_clock = TimezoneClock()
