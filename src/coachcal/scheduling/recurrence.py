"""Expand one recurring scheduling request into concrete lesson instants.

Each occurrence keeps the start's local wall-clock time in the request's zone,
so a 5:00 PM weekly lesson stays at 5:00 PM across DST changes. Monthly steps
are calendar-month arithmetic anchored on the start's day of month and clamped
to shorter months (Jan 31 -> Feb 29 -> Mar 31 -> Apr 30).
"""

import calendar
from collections.abc import Iterator
from datetime import date, datetime, timedelta

from coachcal.scheduling.errors import RecurrenceBoundsExceeded
from coachcal.scheduling.timezone import to_instant, to_local_wall_clock
from coachcal.schemas.recurrence import (
    WEEKS_PER_PATTERN,
    RecurrencePreview,
    RecurrenceRequest,
)
from coachcal.schemas.working_hours import weekday_name

DEFAULT_MAX_INSTANCES = 260
DEFAULT_PREVIEW_LIMIT = 10


def add_months(day: date, months: int) -> date:
    """Shift ``day`` by whole calendar months, clamping to the month's last day."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _nth_date(start: date, pattern: str, interval: int, step: int) -> date:
    if pattern == "monthly":
        return add_months(start, step * interval)
    weeks = WEEKS_PER_PATTERN[pattern] * interval
    return start + timedelta(weeks=step * weeks)


def _candidate_dates(request: RecurrenceRequest) -> Iterator[date]:
    """Every stepped date from the start through ``end_date``, unfiltered."""
    if request.end_date is None:
        raise RecurrenceBoundsExceeded("A recurring schedule needs an end date")
    start = to_local_wall_clock(request.start, request.time_zone).date
    step = 0
    while True:
        current = _nth_date(start, request.pattern, request.interval, step)
        if current > request.end_date:
            return
        yield current
        step += 1


def expand(request: RecurrenceRequest) -> Iterator[datetime]:
    """Lazily yield the UTC instants of every occurrence, in order.

    Dates whose weekday is not in ``working_days_filter`` (when given) are
    skipped without affecting the stepping. Re-invoking with an equal request
    yields the same sequence.

    Raises:
        RecurrenceBoundsExceeded: If the request has no end date.
    """
    local_start = to_local_wall_clock(request.start, request.time_zone)
    allowed = request.working_days_filter
    previous: datetime | None = None

    for current in _candidate_dates(request):
        if allowed is not None and weekday_name(current) not in allowed:
            continue
        instant = to_instant(current, local_start.minute_of_day, request.time_zone)
        if previous is not None and instant <= previous:
            continue
        previous = instant
        yield instant


def count_candidates(request: RecurrenceRequest, limit: int) -> int:
    """Number of stepped dates, counting no further than ``limit + 1``."""
    count = 0
    for _ in _candidate_dates(request):
        count += 1
        if count > limit:
            break
    return count


def validate_request(
    request: RecurrenceRequest, max_instances: int = DEFAULT_MAX_INSTANCES
) -> None:
    """Reject requests that must never reach :func:`expand`.

    Raises:
        RecurrenceBoundsExceeded: If the end date is missing, precedes the
            start date, or the schedule would exceed ``max_instances``.
    """
    if request.end_date is None:
        raise RecurrenceBoundsExceeded("A recurring schedule needs an end date")
    start = to_local_wall_clock(request.start, request.time_zone).date
    if request.end_date < start:
        raise RecurrenceBoundsExceeded(
            f"End date {request.end_date} is before start date {start}"
        )
    if count_candidates(request, max_instances) > max_instances:
        raise RecurrenceBoundsExceeded(
            f"Recurring schedule exceeds the maximum of {max_instances} lessons"
        )


def preview(
    request: RecurrenceRequest,
    limit: int = DEFAULT_PREVIEW_LIMIT,
    max_instances: int = DEFAULT_MAX_INSTANCES,
) -> RecurrencePreview:
    """First ``limit`` instants plus totals for an "N lessons" summary."""
    validate_request(request, max_instances)
    instants = list(expand(request))
    shown = instants[:limit]
    return RecurrencePreview(
        dates=shown, total=len(instants), remaining=len(instants) - len(shown)
    )
