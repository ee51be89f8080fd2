from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from coachcal.database import Base


class Lesson(Base):
    __tablename__ = "lessons"
    # Final authority on double booking: one active lesson per coach per start instant
    __table_args__ = (
        Index(
            "uq_lessons_coach_date",
            "coach_id",
            "date",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    coach_id: Mapped[int] = mapped_column(ForeignKey("coaches.id"), index=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"))
    date: Mapped[datetime]  # UTC start instant
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    status: Mapped[str] = mapped_column(
        String(20), default="confirmed"
    )  # confirmed, pending, completed, cancelled
    duration_minutes: Mapped[int | None] = mapped_column(
        default=None
    )  # None = coach's slot interval
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
