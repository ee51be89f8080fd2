"""Tests for lesson submission against the database."""

from datetime import UTC, date, datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coachcal.models.blocked_time import BlockedTime
from coachcal.models.coach import Client, Coach
from coachcal.models.lesson import Lesson
from coachcal.scheduling.errors import BookingConflict, BookingRejected
from coachcal.scheduling.timezone import to_instant
from coachcal.schemas.working_hours import WorkingHours
from coachcal.services import booking
from coachcal.services.booking import (
    BookingRequest,
    book_lesson,
    book_recurring,
    check_bookable,
    lesson_title,
)

NEW_YORK = "America/New_York"
NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
TUESDAY_TEN = to_instant(date(2024, 3, 5), 10 * 60, NEW_YORK)
WEEKDAYS_ONLY = WorkingHours(
    working_days=["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
)


def _request(instant: datetime = TUESDAY_TEN, duration: int = 60) -> BookingRequest:
    return BookingRequest(
        coach_id=1,
        client_id=1,
        instant=instant,
        zone=NEW_YORK,
        duration_minutes=duration,
        title="Lesson with Sam Park",
    )


async def _count_lessons(db: async_sessionmaker[AsyncSession]) -> int:
    async with db() as session:
        result = await session.execute(select(Lesson))
        return len(result.scalars().all())


class TestCheckBookable:
    def test_future_working_day(self) -> None:
        check_bookable(TUESDAY_TEN, NOW, WEEKDAYS_ONLY, NEW_YORK)

    def test_past_start(self) -> None:
        with pytest.raises(BookingRejected) as exc_info:
            check_bookable(NOW - timedelta(hours=1), NOW, WEEKDAYS_ONLY, NEW_YORK)
        assert exc_info.value.reason == "past"

    def test_non_working_day(self) -> None:
        saturday = to_instant(date(2024, 3, 9), 10 * 60, NEW_YORK)
        with pytest.raises(BookingRejected) as exc_info:
            check_bookable(saturday, NOW, WEEKDAYS_ONLY, NEW_YORK)
        assert exc_info.value.reason == "non_working_day"
        assert str(exc_info.value) == "You are not available on Saturdays"

    def test_override_working_days(self) -> None:
        saturday = to_instant(date(2024, 3, 9), 10 * 60, NEW_YORK)
        check_bookable(saturday, NOW, WEEKDAYS_ONLY, NEW_YORK, override_working_days=True)

    def test_weekday_is_taken_from_the_booking_zone(self) -> None:
        # Friday 9 PM in New York is already Saturday in UTC
        friday_night = to_instant(date(2024, 3, 8), 21 * 60, NEW_YORK)
        check_bookable(friday_night, NOW, WEEKDAYS_ONLY, NEW_YORK)


class TestLessonTitle:
    def test_own_client(self) -> None:
        coach = Coach(id=1, name="Dana Reyes", email="dana@example.com")
        client = Client(id=1, coach_id=1, name="Sam Park")
        assert lesson_title(coach, client, None) == "Lesson with Sam Park"

    def test_client_of_another_coach(self) -> None:
        coach = Coach(id=1, name="Dana Reyes", email="dana@example.com")
        other = Coach(id=2, name="Lee Chen", email="lee@example.com")
        client = Client(id=1, coach_id=2, name="Sam Park")
        assert lesson_title(coach, client, other) == "Lesson - Lee Chen"


class TestBookLesson:
    async def test_creates_lesson(self, student: Client, db: async_sessionmaker) -> None:
        async with db() as session:
            lesson = await book_lesson(session, _request())
        assert lesson.id is not None
        assert lesson.date == TUESDAY_TEN
        assert lesson.status == "confirmed"
        assert lesson.duration_minutes == 60

    async def test_overlap_is_a_conflict(self, student: Client, db: async_sessionmaker) -> None:
        async with db() as session:
            first = await book_lesson(session, _request())
        async with db() as session:
            with pytest.raises(BookingConflict) as exc_info:
                await book_lesson(session, _request(TUESDAY_TEN + timedelta(minutes=30)))
        assert exc_info.value.lesson_id == first.id
        assert await _count_lessons(db) == 1

    async def test_adjacent_lessons_allowed(self, student: Client, db: async_sessionmaker) -> None:
        async with db() as session:
            await book_lesson(session, _request())
            await book_lesson(session, _request(TUESDAY_TEN + timedelta(minutes=60)))
        assert await _count_lessons(db) == 2

    async def test_stale_snapshot_caught_by_unique_index(
        self, student: Client, db: async_sessionmaker, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async with db() as session:
            await book_lesson(session, _request())

        async def no_lessons(*args, **kwargs):
            return []

        monkeypatch.setattr(booking, "load_lessons", no_lessons)
        async with db() as session:
            with pytest.raises(BookingConflict):
                await book_lesson(session, _request())
        assert await _count_lessons(db) == 1

    async def test_cancelled_lesson_frees_the_slot(
        self, student: Client, db: async_sessionmaker
    ) -> None:
        async with db() as session:
            session.add(
                Lesson(
                    coach_id=1,
                    client_id=1,
                    date=TUESDAY_TEN.replace(tzinfo=None),
                    title="Old lesson",
                    status="cancelled",
                    duration_minutes=60,
                )
            )
            await session.commit()
        async with db() as session:
            lesson = await book_lesson(session, _request())
        assert lesson.status == "confirmed"

    async def test_blocked_time_does_not_prevent_booking(
        self, student: Client, db: async_sessionmaker
    ) -> None:
        async with db() as session:
            session.add(
                BlockedTime(
                    coach_id=1,
                    title="Holiday",
                    start_time=datetime(2024, 3, 5, 5, 0),
                    end_time=datetime(2024, 3, 6, 4, 59, 59),
                    is_all_day=True,
                )
            )
            await session.commit()
        async with db() as session:
            lesson = await book_lesson(session, _request())
        assert lesson.date == TUESDAY_TEN


class TestBookRecurring:
    async def test_partial_failure_keeps_successes(
        self, student: Client, db: async_sessionmaker, caplog: pytest.LogCaptureFixture
    ) -> None:
        monday = date(2024, 3, 4)
        instants = [
            to_instant(monday + timedelta(weeks=i), 17 * 60, NEW_YORK) for i in range(4)
        ]
        async with db() as session:
            await book_lesson(session, _request(instants[2]))

        async with db() as session:
            result = await book_recurring(
                session, _request(instants[0]), instants, NOW, WEEKDAYS_ONLY
            )

        assert result.created == 3
        assert result.skipped == 1
        assert result.has_errors
        assert result.failures[0][0] == instants[2]
        assert "already booked" in result.failures[0][1]
        assert [lesson.date for lesson in result.lessons] == [
            instants[0],
            instants[1],
            instants[3],
        ]
        assert await _count_lessons(db) == 4
        summary = [r for r in caplog.records if "1 skipped" in r.getMessage()]
        assert summary[0].levelname == "WARNING"

    async def test_past_instants_reported(self, student: Client, db: async_sessionmaker) -> None:
        instants = [
            to_instant(date(2024, 2, 26), 17 * 60, NEW_YORK),
            to_instant(date(2024, 3, 4), 17 * 60, NEW_YORK),
        ]
        async with db() as session:
            result = await book_recurring(
                session, _request(instants[0]), instants, NOW, WEEKDAYS_ONLY
            )
        assert result.created == 1
        assert result.failures == [(instants[0], "Cannot schedule lessons in the past")]
