from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from coachcal.scheduling.timezone import as_utc
from coachcal.schemas.recurrence import PATTERN_REGEX

STATUS_REGEX = r"^(confirmed|pending|completed|cancelled)$"


class LessonCreate(BaseModel):
    client_id: int
    lesson_date: date
    time: str = Field(max_length=10)  # "h:mm AM"
    time_zone: str | None = None
    duration_minutes: int | None = Field(default=None, ge=15, le=480)
    title: str | None = Field(default=None, max_length=200)
    send_email: bool = True
    override_working_days: bool = False


class RecurringLessonCreate(BaseModel):
    client_id: int
    start_date: date
    time: str = Field(max_length=10)
    end_date: date | None = None
    pattern: str = Field(default="weekly", pattern=PATTERN_REGEX)
    interval: int = Field(default=1, ge=1, le=6)
    time_zone: str | None = None
    send_email: bool = True
    override_working_days: bool = False


class LessonRead(BaseModel):
    id: int
    coach_id: int
    client_id: int
    date: datetime
    title: str
    status: str = Field(pattern=STATUS_REGEX)
    duration_minutes: int | None = None
    description: str | None = None

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator("date")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class LessonFailure(BaseModel):
    instant: datetime
    reason: str


class RecurringLessonResult(BaseModel):
    total_lessons: int
    skipped_lessons: int
    lessons: list[LessonRead]
    failures: list[LessonFailure]
