"""
Analytics module - Workout history aggregation and streak tracking.

This module provides:
- Value types for per-user analytics summaries
- Aggregators for totals, daily buckets, the weekly window and streaks
- The aggregation engine (incremental fold and full rebuild)
- Event adapters and database storage interface
- The storage-facing analytics service
"""
from fitlog.services.analytics.summary import (
    AnalyticsSummary,
    DailyBucket,
    StreakState,
    Totals,
    WeeklyWindow,
    WorkoutEvent,
    calendar_day,
    week_bounds,
)
from fitlog.services.analytics.adapter import (
    EventAdapter,
    WorkoutLogAdapter,
    get_adapter,
)
from fitlog.services.analytics.engine import AnalyticsEngine, sort_events
from fitlog.services.analytics.store import AnalyticsStore, WorkoutLogStore
from fitlog.services.analytics.locks import UserLockRegistry, user_locks
from fitlog.services.analytics.service import AnalyticsService

__all__ = [
    # Data structures
    "AnalyticsSummary",
    "DailyBucket",
    "StreakState",
    "Totals",
    "WeeklyWindow",
    "WorkoutEvent",
    "calendar_day",
    "week_bounds",
    # Adapters
    "EventAdapter",
    "WorkoutLogAdapter",
    "get_adapter",
    # Engine
    "AnalyticsEngine",
    "sort_events",
    # Store
    "AnalyticsStore",
    "WorkoutLogStore",
    # Service
    "UserLockRegistry",
    "user_locks",
    "AnalyticsService",
]
