"""Answer "is this slot already taken?" from a coach's existing lessons.

Lessons are stored as instants. The index converts each one to the viewer's
wall clock once, then works in minutes relative to local midnight so slot
candidates (also wall-clock values) compare like with like.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from coachcal.scheduling.timespec import MINUTES_PER_DAY
from coachcal.scheduling.timezone import as_utc, resolve_zone, to_local_wall_clock
from coachcal.schemas.lesson import LessonRead

INACTIVE_STATUSES = frozenset({"cancelled"})


def _overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    return start_a < end_b and start_b < end_a


class BookingIndex:
    """Lookup over one coach's lessons, seen from one viewer zone.

    ``default_duration`` is the coach's current slot interval; lessons that do
    not carry their own duration occupy that many minutes.
    """

    def __init__(
        self,
        lessons: Iterable[LessonRead],
        zone: str,
        default_duration: int,
        coach_id: int | None = None,
    ) -> None:
        self._zone = resolve_zone(zone)
        self._default_duration = default_duration
        self._by_date: dict[date, list[tuple[int, int, LessonRead]]] = {}
        self._lessons: list[LessonRead] = []

        for lesson in lessons:
            if lesson.status in INACTIVE_STATUSES:
                continue
            if coach_id is not None and lesson.coach_id != coach_id:
                continue
            self._lessons.append(lesson)
            local = to_local_wall_clock(lesson.date, self._zone)
            duration = self.duration_of(lesson)
            self._by_date.setdefault(local.date, []).append(
                (local.minute_of_day, local.minute_of_day + duration, lesson)
            )

    def __len__(self) -> int:
        return len(self._lessons)

    def duration_of(self, lesson: LessonRead) -> int:
        return lesson.duration_minutes or self._default_duration

    def _intervals_for(self, day: date) -> list[tuple[int, int, LessonRead]]:
        """Lesson intervals relative to local midnight of ``day``.

        Includes lessons from the previous day that run past midnight.
        """
        intervals = list(self._by_date.get(day, []))
        for start, end, lesson in self._by_date.get(day - timedelta(days=1), []):
            if end > MINUTES_PER_DAY:
                intervals.append((start - MINUTES_PER_DAY, end - MINUTES_PER_DAY, lesson))
        return intervals

    def lesson_at(
        self, day: date, minute_of_day: int, duration_minutes: int = 0
    ) -> LessonRead | None:
        """The lesson occupying the candidate slot, if any.

        With ``duration_minutes`` 0 the candidate is a single point and matches
        when it falls inside ``[start, start + lesson duration)``. With a
        positive duration the candidate interval must intersect the lesson.
        """
        for start, end, lesson in self._intervals_for(day):
            if duration_minutes <= 0:
                if start <= minute_of_day < end:
                    return lesson
            elif _overlaps(minute_of_day, minute_of_day + duration_minutes, start, end):
                return lesson
        return None

    def is_taken(self, day: date, minute_of_day: int, duration_minutes: int = 0) -> bool:
        return self.lesson_at(day, minute_of_day, duration_minutes) is not None

    def conflicts(self, instant: datetime, duration_minutes: int) -> LessonRead | None:
        """The first lesson whose instant range overlaps ``[instant, +duration)``."""
        start = as_utc(instant)
        end = start + timedelta(minutes=duration_minutes)
        for lesson in self._lessons:
            lesson_end = lesson.date + timedelta(minutes=self.duration_of(lesson))
            if start < lesson_end and lesson.date < end:
                return lesson
        return None
