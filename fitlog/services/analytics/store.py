"""
Analytics Store - Database operations for summaries and workout history.
"""
import time
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.core.logging import get_logger
from fitlog.models.analytics import UserAnalytics
from fitlog.models.workout import WorkoutLog
from fitlog.services.analytics.adapter import get_adapter
from fitlog.services.analytics.summary import (
    AnalyticsSummary,
    DailyBucket,
    StreakState,
    Totals,
    WeeklyWindow,
    WorkoutEvent,
)

logger = get_logger(__name__)


def parse_user_id(user_id: str) -> uuid.UUID:
    """
    Parse a user ID string.

    Raises:
        ValueError: If the ID is not a UUID
    """
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        raise ValueError(f"Invalid user_id format: {user_id}")


# ========================================
# Row <-> Summary conversion
# ========================================

def row_to_summary(row: UserAnalytics) -> AnalyticsSummary:
    """Convert a stored row to the engine's summary value."""
    weekly = None
    if row.weekly_summary:
        w = row.weekly_summary
        weekly = WeeklyWindow(
            start_date=datetime.fromisoformat(w["startDate"]),
            end_date=datetime.fromisoformat(w["endDate"]),
            workout_count=w.get("workoutCount", 0),
            total_duration=w.get("totalDuration", 0),
            calories_burned=w.get("caloriesBurned", 0),
            workout_ids=list(w.get("workouts", [])),
        )

    daily = [
        DailyBucket(
            date=date.fromisoformat(d["date"]),
            workout_count=d.get("workoutCount", 0),
            total_duration=d.get("totalDuration", 0),
            calories_burned=d.get("caloriesBurned", 0),
            workout_ids=list(d.get("workouts", [])),
        )
        for d in (row.daily_stats or [])
    ]

    return AnalyticsSummary(
        user_id=str(row.user_id),
        totals=Totals(
            workout_count=row.total_workouts or 0,
            total_duration=row.total_duration or 0,
            total_calories_burned=row.total_calories_burned or 0,
        ),
        streak=StreakState(
            current=row.workout_streak or 0,
            longest=row.longest_streak or 0,
            last_counted_day=row.last_counted_day,
        ),
        weekly=weekly,
        daily=daily,
        last_workout_at=row.last_workout_at,
    )


def bucket_to_json(bucket: DailyBucket) -> Dict[str, Any]:
    return {
        "date": bucket.date.isoformat(),
        "workoutCount": bucket.workout_count,
        "totalDuration": bucket.total_duration,
        "caloriesBurned": bucket.calories_burned,
        "workouts": list(bucket.workout_ids),
    }


def weekly_to_json(window: Optional[WeeklyWindow]) -> Optional[Dict[str, Any]]:
    if window is None:
        return None
    return {
        "startDate": window.start_date.isoformat(),
        "endDate": window.end_date.isoformat(),
        "workoutCount": window.workout_count,
        "totalDuration": window.total_duration,
        "caloriesBurned": window.calories_burned,
        "workouts": list(window.workout_ids),
    }


def apply_summary(row: UserAnalytics, summary: AnalyticsSummary) -> None:
    """
    Overwrite the workout-derived columns of a row from a summary.

    Body measurements, fitness scores and achievements are left as
    they are. JSON columns are reassigned, never mutated in place, so
    the ORM sees the change.
    """
    row.total_workouts = summary.totals.workout_count
    row.total_duration = summary.totals.total_duration
    row.total_calories_burned = summary.totals.total_calories_burned

    row.workout_streak = summary.streak.current
    row.longest_streak = summary.streak.longest
    row.last_counted_day = summary.streak.last_counted_day
    row.last_workout_at = summary.last_workout_at

    row.weekly_summary = weekly_to_json(summary.weekly)
    row.daily_stats = [bucket_to_json(b) for b in summary.daily]


class AnalyticsStore:
    """
    Database store for per-user analytics summaries.

    Handles lookup, lazy creation and persistence of UserAnalytics.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user(self, user_id: str) -> Optional[UserAnalytics]:
        """
        Get the analytics row for a user.

        Args:
            user_id: User ID

        Returns:
            UserAnalytics or None if not found
        """
        try:
            user_uuid = parse_user_id(user_id)
        except ValueError:
            logger.warning("Invalid user_id format", user_id=user_id)
            return None

        result = await self.db.execute(
            select(UserAnalytics).where(UserAnalytics.user_id == user_uuid)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: str) -> UserAnalytics:
        """
        Get the analytics row for a user, creating an empty one if needed.

        This is the only place summaries are created lazily.

        Args:
            user_id: User ID

        Returns:
            Existing or newly created UserAnalytics
        """
        user_uuid = parse_user_id(user_id)

        existing = await self.get_by_user(user_id)
        if existing:
            return existing

        row = UserAnalytics(
            user_id=user_uuid,
            total_workouts=0,
            total_duration=0,
            total_calories_burned=0,
            workout_streak=0,
            longest_streak=0,
            weekly_summary=None,
            daily_stats=[],
            body_measurements=[],
            fitness_scores=[],
            achievements=[],
        )

        try:
            async with self.db.begin_nested():
                self.db.add(row)
        except IntegrityError:
            # Another writer created it first; only the savepoint is rolled back
            logger.debug("Analytics row created concurrently", user_id=user_id)
            existing = await self.get_by_user(user_id)
            if existing is None:
                raise
            return existing

        logger.debug(
            "Created analytics summary",
            user_id=user_id,
            analytics_id=str(row.id)
        )

        return row

    def to_summary(self, row: UserAnalytics) -> AnalyticsSummary:
        return row_to_summary(row)

    async def save(self, row: UserAnalytics, summary: AnalyticsSummary) -> UserAnalytics:
        """
        Persist a summary onto its row and commit.

        Args:
            row: Row previously returned by get_or_create
            summary: Summary to store

        Returns:
            Refreshed UserAnalytics
        """
        apply_summary(row, summary)

        await self.db.commit()
        await self.db.refresh(row)

        logger.debug(
            "Saved analytics summary",
            user_id=summary.user_id,
            workout_count=summary.totals.workout_count,
            version=row.version
        )

        return row

    # ========================================
    # Independently maintained collections
    # ========================================

    async def add_body_measurement(
        self,
        user_id: str,
        measurement: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Append a body measurement dated now."""
        row = await self.get_or_create(user_id)
        entry = {**measurement, "date": datetime.utcnow().isoformat()}
        row.body_measurements = [*(row.body_measurements or []), entry]
        await self.db.commit()
        return entry

    async def add_fitness_score(
        self,
        user_id: str,
        strength: int,
        cardio: int,
        flexibility: int,
        consistency: int
    ) -> Dict[str, Any]:
        """Append a fitness score dated now; overall is the rounded mean."""
        row = await self.get_or_create(user_id)
        entry = {
            "date": datetime.utcnow().isoformat(),
            "overall": round((strength + cardio + flexibility + consistency) / 4),
            "strength": strength,
            "cardio": cardio,
            "flexibility": flexibility,
            "consistency": consistency,
        }
        row.fitness_scores = [*(row.fitness_scores or []), entry]
        await self.db.commit()
        return entry

    async def add_achievement(
        self,
        user_id: str,
        name: str,
        description: str,
        icon: str
    ) -> Dict[str, Any]:
        """Append an achievement earned now."""
        row = await self.get_or_create(user_id)
        entry = {
            "id": f"ach_{int(time.time() * 1000)}",
            "name": name,
            "description": description,
            "icon": icon,
            "earnedAt": datetime.utcnow().isoformat(),
        }
        row.achievements = [*(row.achievements or []), entry]
        await self.db.commit()
        return entry


class WorkoutLogStore:
    """
    Database store for workout logs.

    Also serves as the event source for analytics rebuilds.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        user_id: str,
        title: str,
        duration: int = 0,
        calories_burned: int = 0,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None
    ) -> WorkoutLog:
        """
        Create and commit a workout log.

        Args:
            user_id: Owner
            title: Workout title
            duration: Minutes
            calories_burned: Calories
            notes: Free-text notes
            created_at: Occurrence time, defaults to now

        Returns:
            Created WorkoutLog
        """
        log = WorkoutLog(
            user_id=parse_user_id(user_id),
            title=title,
            duration=duration,
            calories_burned=calories_burned,
            notes=notes,
            created_at=created_at or datetime.utcnow(),
        )
        self.db.add(log)
        await self.db.commit()
        await self.db.refresh(log)

        logger.debug("Created workout log", user_id=user_id, workout_id=str(log.id))

        return log

    async def list_for_user(self, user_id: str) -> List[WorkoutLog]:
        """Get a user's workout logs, oldest first, ties in insertion order."""
        result = await self.db.execute(
            select(WorkoutLog)
            .where(WorkoutLog.user_id == parse_user_id(user_id))
            .order_by(WorkoutLog.created_at, WorkoutLog.seq)
        )
        return list(result.scalars().all())

    async def load_history(self, user_id: str) -> List[WorkoutEvent]:
        """
        Load a user's full workout history as events.

        Args:
            user_id: User ID

        Returns:
            Events ordered by occurrence time
        """
        adapter = get_adapter("workout_log")
        logs = await self.list_for_user(user_id)
        return [adapter.to_event(log) for log in logs]
