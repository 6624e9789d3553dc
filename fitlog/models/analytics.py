"""
User Analytics database model.
Stores one derived analytics summary per user:
- Totals and streak columns
- Current weekly window and per-day buckets (JSON)
- Independently maintained collections: body measurements,
  fitness scores, achievements (JSON)
"""
import uuid
from datetime import date, datetime, timezone
from typing import Optional
from sqlalchemy import JSON, Date, DateTime, Integer, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from fitlog.core.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _millis(value: Optional[datetime]) -> Optional[int]:
    return int(value.replace(tzinfo=timezone.utc).timestamp() * 1000) if value else None


class UserAnalytics(Base):
    """Analytics summary stored in database, unique per user."""

    __tablename__ = "user_analytics"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        unique=True,
        index=True
    )

    # Totals
    total_workouts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_calories_burned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Streak
    workout_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_counted_day: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_workout_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Rollups
    weekly_summary: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    daily_stats: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Maintained outside workout folding
    body_measurements: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    fitness_scores: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    achievements: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Optimistic concurrency: a stale write raises StaleDataError on flush
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": str(self.id),
            "userId": str(self.user_id),
            "totalWorkouts": self.total_workouts,
            "totalDuration": self.total_duration,
            "totalCaloriesBurned": self.total_calories_burned,
            "workoutStreak": self.workout_streak,
            "longestStreak": self.longest_streak,
            "lastWorkoutDate": _millis(self.last_workout_at),
            "weeklyActivitySummary": self.weekly_summary,
            "dailyStats": self.daily_stats or [],
            "bodyMeasurements": self.body_measurements or [],
            "fitnessScores": self.fitness_scores or [],
            "achievements": self.achievements or [],
            "createdAt": _millis(self.created_at),
            "updatedAt": _millis(self.updated_at),
        }

