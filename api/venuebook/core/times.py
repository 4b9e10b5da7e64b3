"""Wall-clock helpers shared by the availability modules.

Times of day travel between modules as "HH:MM" strings and are computed on as
integer minutes since midnight, so that cooldowns such as 20 minutes never
accumulate float error. "24:00" is accepted as an end-of-day close.
"""

MINUTES_PER_DAY = 24 * 60


def parse_minutes(value: str) -> int:
    """Parse "HH:MM" (or a bare hour such as "9") into minutes since midnight.

    "09:00" -> 540, "9" -> 540, "24:00" -> 1440. Seconds, if present, are ignored.
    Raises ValueError for anything else.
    """
    text = str(value).strip()
    if not text:
        raise ValueError("empty time of day")

    parts = text.split(":")
    if len(parts) > 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"invalid time of day: {value!r}")

    hours = int(parts[0])
    minutes = int(parts[1]) if len(parts) > 1 else 0
    if minutes >= 60:
        raise ValueError(f"invalid time of day: {value!r}")

    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY:
        raise ValueError(f"time of day out of range: {value!r}")
    return total


def format_minutes(minutes: int) -> str:
    """540 -> "09:00", 1440 -> "24:00"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def hours_to_minutes(hours: float) -> int:
    return round(hours * 60)


def minutes_to_hours(minutes: int) -> float:
    """750 -> 12.5"""
    return minutes / 60
