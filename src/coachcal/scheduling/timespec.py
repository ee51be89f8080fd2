"""Parse and format 12-hour time strings ("9:00 AM") as minute-of-day integers."""

import re

from coachcal.scheduling.errors import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")


def parse_time(text: str) -> int:
    """Convert ``H:MM AM|PM`` to minutes since midnight.

    12 AM maps to 0 and 12 PM to 720. Raises InvalidTimeFormat when the text
    does not match or the hour/minute is out of range.
    """
    if not isinstance(text, str):
        raise InvalidTimeFormat(text)
    match = _TIME_RE.match(text)
    if match is None:
        raise InvalidTimeFormat(text)

    hour = int(match.group(1))
    minute = int(match.group(2))
    period = match.group(3).upper()
    if not 1 <= hour <= 12 or minute > 59:
        raise InvalidTimeFormat(text)

    if hour == 12:
        hour = 0
    if period == "PM":
        hour += 12
    return hour * 60 + minute


def format_time(minute_of_day: int) -> str:
    """Render minutes since midnight as ``h:mm AM`` (e.g. 780 -> "1:00 PM")."""
    if not 0 <= minute_of_day < MINUTES_PER_DAY:
        raise ValueError(f"minute_of_day out of range: {minute_of_day}")
    hour24, minute = divmod(minute_of_day, 60)
    period = "PM" if hour24 >= 12 else "AM"
    hour12 = hour24 % 12 or 12
    return f"{hour12}:{minute:02d} {period}"


def canonical_time(text: str) -> str:
    """Normalise a time string, e.g. "9:00am" -> "9:00 AM"."""
    return format_time(parse_time(text))
