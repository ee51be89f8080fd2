from datetime import date

from pydantic import BaseModel, Field, field_validator

from coachcal.scheduling.timespec import canonical_time

# Index matches date.weekday(): 0=Monday, 6=Sunday
WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

WEEKDAY_PATTERN = r"^(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)$"


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def _canonical(value: str) -> str:
    # Malformed strings are kept as-is; range validation reports them.
    try:
        return canonical_time(value)
    except ValueError:
        return value


class CustomDayOverride(BaseModel):
    enabled: bool = True
    start_time: str = Field(max_length=10)
    end_time: str = Field(max_length=10)

    model_config = {"frozen": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalise_time(cls, value: str) -> str:
        return _canonical(value)


class WorkingHours(BaseModel):
    start_time: str = Field(default="9:00 AM", max_length=10)
    end_time: str = Field(default="6:00 PM", max_length=10)
    working_days: list[str] = Field(default_factory=lambda: list(WEEKDAYS))
    slot_interval_minutes: int = Field(default=60, ge=15, le=120)
    custom_working_hours: dict[str, CustomDayOverride] | None = None

    model_config = {"frozen": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalise_time(cls, value: str) -> str:
        return _canonical(value)

    @field_validator("working_days")
    @classmethod
    def _check_days(cls, value: list[str]) -> list[str]:
        unknown = [d for d in value if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
        # Keep calendar order, drop duplicates
        return [d for d in WEEKDAYS if d in value]

    @field_validator("custom_working_hours")
    @classmethod
    def _check_override_days(
        cls, value: dict[str, CustomDayOverride] | None
    ) -> dict[str, CustomDayOverride] | None:
        if value is None:
            return None
        unknown = [d for d in value if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
        return value


class WorkingHoursUpdate(BaseModel):
    start_time: str = Field(max_length=10)
    end_time: str = Field(max_length=10)
    working_days: list[str] | None = None
    slot_interval_minutes: int | None = Field(default=None, ge=15, le=120)
    custom_working_hours: dict[str, CustomDayOverride] | None = None


class WorkingHoursRead(WorkingHours):
    coach_id: int
    is_default: bool = False
