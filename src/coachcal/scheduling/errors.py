"""Error taxonomy for the scheduling engine.

Parsing and configuration errors are ``ValueError`` subclasses so callers can
fall back to safe defaults; storage conflicts are ``RuntimeError`` subclasses
and must be surfaced, not retried.
"""


class SchedulingError(Exception):
    """Base class for every error raised by the scheduling engine."""


class InvalidTimeFormat(SchedulingError, ValueError):
    """A time string did not match ``H:MM AM|PM``."""

    def __init__(self, text: object) -> None:
        super().__init__(f"Invalid time format: {text!r} (expected e.g. '9:00 AM')")
        self.text = text


class InvalidRangeError(SchedulingError, ValueError):
    """An end time is not strictly after its start time."""

    def __init__(self, start: str, end: str, day: str | None = None) -> None:
        where = f" on {day}" if day else ""
        super().__init__(f"End time {end} must be after start time {start}{where}")
        self.start = start
        self.end = end
        self.day = day


class InvalidTimeZone(SchedulingError, ValueError):
    """An IANA timezone name could not be resolved."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown time zone: {name!r}")
        self.name = name


class RecurrenceBoundsExceeded(SchedulingError, ValueError):
    """A recurrence request has no usable end date or yields too many instances."""


class BookingRejected(SchedulingError, ValueError):
    """A booking request is invalid on its own.

    ``reason`` is "past" or "non_working_day".
    """

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


class BookingConflict(SchedulingError, RuntimeError):
    """The storage layer already holds a lesson overlapping the requested slot."""

    def __init__(self, message: str, lesson_id: int | None = None) -> None:
        super().__init__(message)
        self.lesson_id = lesson_id
