"""
Workout Log database model.
The source of workout events for analytics.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, Text, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fitlog.core.database import Base


class WorkoutLog(Base):
    """A recorded workout stored in database."""

    __tablename__ = "workout_logs"

    # Insertion order; breaks ties between logs sharing a created_at
    seq: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        unique=True,
        index=True,
        default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # minutes
    calories_burned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        index=True
    )

    __table_args__ = (
        CheckConstraint("duration >= 0", name="ck_workout_logs_duration_non_negative"),
        CheckConstraint("calories_burned >= 0", name="ck_workout_logs_calories_non_negative"),
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": str(self.id),
            "userId": str(self.user_id),
            "title": self.title,
            "duration": self.duration,
            "caloriesBurned": self.calories_burned,
            "notes": self.notes,
            "createdAt": int(self.created_at.replace(tzinfo=timezone.utc).timestamp() * 1000),
        }
