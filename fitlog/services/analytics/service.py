"""
Analytics Service - Storage-facing entry points for the analytics engine.

Wraps the pure engine with:
- Per-user serialization of read-modify-write
- Lazy summary creation
- Load/save failure handling (AggregationError)
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.core.config import settings
from fitlog.core.exceptions import HistoryLoadError, SummaryLoadError, SummarySaveError
from fitlog.core.logging import get_logger, log_storage_error
from fitlog.models.analytics import UserAnalytics
from fitlog.models.workout import WorkoutLog
from fitlog.services.analytics.adapter import get_adapter
from fitlog.services.analytics.aggregators import is_out_of_order
from fitlog.services.analytics.engine import AnalyticsEngine
from fitlog.services.analytics.locks import UserLockRegistry, user_locks
from fitlog.services.analytics.store import AnalyticsStore, WorkoutLogStore, bucket_to_json
from fitlog.services.analytics.summary import AnalyticsSummary, WorkoutEvent

logger = get_logger(__name__)


class AnalyticsService:
    """
    Analytics operations for one database session.

    Usage:
        service = AnalyticsService(db)
        summary = await service.record_workout(event)
        row = await service.rebuild(user_id)
    """

    def __init__(
        self,
        db: AsyncSession,
        engine: Optional[AnalyticsEngine] = None,
        locks: Optional[UserLockRegistry] = None
    ):
        self.db = db
        self.store = AnalyticsStore(db)
        self.workouts = WorkoutLogStore(db)
        self.engine = engine or AnalyticsEngine()
        self._locks = locks if locks is not None else user_locks
        self._lock_timeout = settings.ANALYTICS_LOCK_TIMEOUT_SECONDS

    async def record_workout(self, event: WorkoutEvent) -> AnalyticsSummary:
        """
        Incremental update: fold one new workout into the user's summary.

        Args:
            event: The workout just recorded

        Returns:
            The persisted summary

        Raises:
            AggregationError: The summary could not be loaded or saved;
                the stored summary is unchanged
        """
        user_id = event.user_id

        async with self._locks.hold(user_id, self._lock_timeout):
            row = await self._load_row(user_id)
            summary = self.store.to_summary(row)

            if is_out_of_order(summary.streak, event.day):
                logger.warning(
                    "Workout folded out of order, streak may be inaccurate until rebuild",
                    user_id=user_id,
                    event_id=event.id,
                    event_day=event.day.isoformat(),
                    last_counted_day=summary.streak.last_counted_day.isoformat(),
                )

            updated = self.engine.fold(summary, event)
            await self._save_row(row, updated)

        return updated

    async def record_workout_log(self, log: WorkoutLog) -> AnalyticsSummary:
        """Fold a stored workout log into its owner's summary."""
        event = get_adapter("workout_log").to_event(log)
        return await self.record_workout(event)

    async def rebuild(self, user_id: str) -> UserAnalytics:
        """
        Full rebuild: recompute the user's summary from complete history.

        The stored summary is only replaced once the whole history has
        been loaded and folded. Body measurements, fitness scores and
        achievements are kept.

        Args:
            user_id: User ID

        Returns:
            The persisted analytics row

        Raises:
            AggregationError: History, load or save failed; the stored
                summary is unchanged
        """
        async with self._locks.hold(user_id, self._lock_timeout):
            try:
                events = await self.workouts.load_history(user_id)
            except SQLAlchemyError as e:
                await self.db.rollback()
                log_storage_error(logger, "load_history", user_id, e)
                raise HistoryLoadError(user_id) from e

            summary = self.engine.rebuild(user_id, events)

            row = await self._load_row(user_id)
            return await self._save_row(row, summary)

    async def get_overview(self, user_id: str) -> UserAnalytics:
        """Get the user's analytics row, creating it on first access."""
        row = await self._load_row(user_id)
        await self.db.commit()
        return row

    async def get_daily_stats(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        """
        Get daily buckets within a date range, ascending.

        Args:
            user_id: User ID
            start_date: Inclusive start, defaults to end minus DAILY_STATS_DEFAULT_DAYS
            end_date: Inclusive end, defaults to today

        Returns:
            Daily buckets as API dicts; empty if the user has no summary
        """
        end = end_date or date.today()
        start = start_date or end - timedelta(days=settings.DAILY_STATS_DEFAULT_DAYS)

        row = await self.store.get_by_user(user_id)
        if row is None:
            return []

        summary = self.store.to_summary(row)
        return [bucket_to_json(b) for b in summary.daily_between(start, end)]

    async def list_body_measurements(self, user_id: str) -> List[Dict[str, Any]]:
        row = await self.store.get_by_user(user_id)
        return _newest_first(row.body_measurements if row else [], "date")

    async def list_fitness_scores(self, user_id: str) -> List[Dict[str, Any]]:
        row = await self.store.get_by_user(user_id)
        return _newest_first(row.fitness_scores if row else [], "date")

    async def list_achievements(self, user_id: str) -> List[Dict[str, Any]]:
        row = await self.store.get_by_user(user_id)
        return _newest_first(row.achievements if row else [], "earnedAt")

    async def _load_row(self, user_id: str) -> UserAnalytics:
        try:
            return await self.store.get_or_create(user_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_storage_error(logger, "load_summary", user_id, e)
            raise SummaryLoadError(user_id) from e

    async def _save_row(self, row: UserAnalytics, summary: AnalyticsSummary) -> UserAnalytics:
        try:
            return await self.store.save(row, summary)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_storage_error(logger, "save_summary", summary.user_id, e)
            raise SummarySaveError(summary.user_id) from e


def _newest_first(entries: Optional[List[Dict[str, Any]]], key: str) -> List[Dict[str, Any]]:
    return sorted(entries or [], key=lambda e: e.get(key) or "", reverse=True)
