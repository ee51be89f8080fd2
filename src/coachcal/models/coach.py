from datetime import datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from coachcal.database import Base


class Coach(Base):
    __tablename__ = "coaches"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    organization_id: Mapped[int | None] = mapped_column(
        ForeignKey("organizations.id"), default=None
    )
    # Working hours; all None until the coach saves them once
    working_start_time: Mapped[str | None] = mapped_column(String(10), default=None)  # "9:00 AM"
    working_end_time: Mapped[str | None] = mapped_column(String(10), default=None)
    working_days: Mapped[str | None] = mapped_column(Text, default=None)  # JSON list of weekdays
    slot_interval_minutes: Mapped[int | None] = mapped_column(default=None)
    custom_working_hours: Mapped[str | None] = mapped_column(
        Text, default=None
    )  # JSON: {"Monday": {"enabled": true, "start_time": ..., "end_time": ...}}
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True)
    coach_id: Mapped[int] = mapped_column(ForeignKey("coaches.id"))
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str | None] = mapped_column(String(255), default=None)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
