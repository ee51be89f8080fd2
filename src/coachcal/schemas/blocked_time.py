from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from coachcal.scheduling.timezone import as_utc


class BlockedTimeBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    is_all_day: bool = False


class BlockedTimeCreate(BlockedTimeBase):
    """Local (naive) start/end in ``time_zone``, or both with a UTC offset.

    For all-day blocks only the date parts matter: the block covers every
    local day from ``start`` to ``end`` inclusive.
    """

    start: datetime
    end: datetime
    time_zone: str | None = None

    @model_validator(mode="after")
    def _check_order(self) -> "BlockedTimeCreate":
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("Start and end must both carry a UTC offset or both omit it")
        if self.is_all_day:
            if self.end.date() < self.start.date():
                raise ValueError("End date must not be before start date")
        elif self.end <= self.start:
            raise ValueError("End time must be after start time")
        return self


class BlockedTimeUpdate(BlockedTimeCreate):
    pass


class BlockedTimeRead(BlockedTimeBase):
    id: int
    coach_id: int
    start_time: datetime
    end_time: datetime

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
