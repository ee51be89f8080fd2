from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from coachcal.scheduling.timezone import as_utc

# Weeks advanced per step (times the interval) for each weekly-family pattern
WEEKS_PER_PATTERN: dict[str, int] = {
    "weekly": 1,
    "biweekly": 2,
    "triweekly": 3,
    "quadweekly": 4,
    "pentweekly": 5,
    "hexweekly": 6,
}

PATTERN_REGEX = r"^(weekly|biweekly|triweekly|quadweekly|pentweekly|hexweekly|monthly)$"


class RecurrenceRequest(BaseModel):
    start: datetime
    end_date: date | None = None
    pattern: str = Field(default="weekly", pattern=PATTERN_REGEX)
    interval: int = Field(default=1, ge=1, le=6)
    working_days_filter: frozenset[str] | None = None
    time_zone: str = "UTC"

    model_config = {"frozen": True}

    @field_validator("start")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class RecurrencePreviewRequest(BaseModel):
    start_date: date
    time: str = Field(max_length=10)
    end_date: date | None = None
    pattern: str = Field(default="weekly", pattern=PATTERN_REGEX)
    interval: int = Field(default=1, ge=1, le=6)
    time_zone: str | None = None
    override_working_days: bool = False


class RecurrencePreview(BaseModel):
    dates: list[datetime]
    total: int
    remaining: int
