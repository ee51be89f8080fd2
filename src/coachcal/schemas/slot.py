from datetime import date

from pydantic import BaseModel, Field


class SlotRead(BaseModel):
    time: str  # "h:mm AM"
    minute_of_day: int = Field(ge=0, lt=24 * 60)
    state: str = Field(pattern=r"^(available|booked|blocked)$")
    blocked_reason: str | None = None
    lesson_id: int | None = None
    coach_id: int | None = None


class DaySlotsRead(BaseModel):
    date: date
    coach_id: int
    time_zone: str
    working_day: bool
    slots: list[SlotRead]
