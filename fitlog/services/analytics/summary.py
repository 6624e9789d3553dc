"""
Analytics value types.

The aggregation core works on these plain dataclasses only; the ORM
model in fitlog.models.analytics converts to and from them at the
storage boundary.

Calendar rules used everywhere dates are compared:
- Calendar day: the occurrence timestamp truncated to midnight. No
  timezone conversion happens beyond this truncation.
- Calendar week: Sunday 00:00 through the following Saturday
  23:59:59.999.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple


END_OF_DAY = time(23, 59, 59, 999000)


def calendar_day(timestamp: datetime) -> date:
    """Truncate a timestamp to its calendar day."""
    return timestamp.date()


def week_bounds(day: date) -> Tuple[datetime, datetime]:
    """
    Get the Sunday-aligned window containing a day.

    Args:
        day: Calendar day

    Returns:
        (window start at Sunday midnight, window end at Saturday end-of-day)
    """
    # date.weekday() is Monday=0; shift so Sunday=0
    offset = (day.weekday() + 1) % 7
    start_day = day - timedelta(days=offset)
    end_day = start_day + timedelta(days=6)
    return datetime.combine(start_day, time.min), datetime.combine(end_day, END_OF_DAY)


@dataclass(frozen=True)
class WorkoutEvent:
    """
    A recorded workout, as seen by the analytics engine.

    Immutable; the engine never modifies events.
    """
    id: str
    user_id: str
    occurred_at: datetime
    duration: int = 0  # minutes
    calories_burned: Optional[int] = 0

    def __post_init__(self):
        if self.duration < 0:
            raise ValueError(f"Workout duration must be >= 0, got {self.duration}")
        if self.calories_burned is not None and self.calories_burned < 0:
            raise ValueError(f"Calories burned must be >= 0, got {self.calories_burned}")

    @property
    def calories(self) -> int:
        """Calories with a missing value counted as 0."""
        return self.calories_burned or 0

    @property
    def day(self) -> date:
        return calendar_day(self.occurred_at)


@dataclass
class Totals:
    """Running totals over every folded workout."""
    workout_count: int = 0
    total_duration: int = 0
    total_calories_burned: int = 0


@dataclass
class DailyBucket:
    """Rollup of the workouts on one calendar day."""
    date: date
    workout_count: int = 0
    total_duration: int = 0
    calories_burned: int = 0
    workout_ids: List[str] = field(default_factory=list)


@dataclass
class WeeklyWindow:
    """Rollup for the Sunday-Saturday week of the last folded workout."""
    start_date: datetime
    end_date: datetime
    workout_count: int = 0
    total_duration: int = 0
    calories_burned: int = 0
    workout_ids: List[str] = field(default_factory=list)


@dataclass
class StreakState:
    """Consecutive-day workout streak."""
    current: int = 0
    longest: int = 0
    last_counted_day: Optional[date] = None


@dataclass
class AnalyticsSummary:
    """
    Per-user derived analytics state.

    Only the workout-derived fields live here. Body measurements,
    fitness scores and achievements are kept on the stored row and are
    never touched by folding.
    """
    user_id: str
    totals: Totals = field(default_factory=Totals)
    streak: StreakState = field(default_factory=StreakState)
    weekly: Optional[WeeklyWindow] = None
    daily: List[DailyBucket] = field(default_factory=list)
    last_workout_at: Optional[datetime] = None

    @classmethod
    def empty(cls, user_id: str) -> "AnalyticsSummary":
        """Fresh summary: zero totals, no buckets, no window, streak unset."""
        return cls(user_id=user_id)

    def bucket_for(self, day: date) -> Optional[DailyBucket]:
        """Find the bucket for an exact calendar day."""
        # Recent days sit at the end of the list
        for bucket in reversed(self.daily):
            if bucket.date == day:
                return bucket
        return None

    def daily_between(self, start: date, end: date) -> List[DailyBucket]:
        """Buckets with start <= date <= end, ascending by date."""
        selected = [b for b in self.daily if start <= b.date <= end]
        return sorted(selected, key=lambda b: b.date)
