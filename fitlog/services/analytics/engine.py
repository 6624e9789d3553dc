"""
Analytics Engine - Folds workout events into per-user summaries.

Orchestrates:
- Totals accumulation
- Daily bucketing
- Weekly window summarizing
- Streak tracking

Two entry points share one per-event fold:
- fold(): incremental update with a single new event
- rebuild(): replay of a user's full history from an empty summary

Both are pure: no I/O, no locking. Loading and saving summaries is the
caller's job (see AnalyticsService).
"""
import copy
from typing import Iterable, List, Optional, Sequence

from fitlog.core.logging import get_logger
from fitlog.services.analytics.aggregators import (
    DailyBucketer,
    StreakTracker,
    SummaryAggregator,
    TotalsAccumulator,
    WeeklyWindowSummarizer,
)
from fitlog.services.analytics.summary import AnalyticsSummary, WorkoutEvent

logger = get_logger(__name__)


def sort_events(events: Iterable[WorkoutEvent]) -> List[WorkoutEvent]:
    """
    Order events for folding.

    Ascending by timestamp; the sort is stable, so events sharing a
    timestamp keep the order they were supplied in.
    """
    return sorted(events, key=lambda e: e.occurred_at)


class AnalyticsEngine:
    """
    Aggregation core.

    Usage:
        engine = AnalyticsEngine()
        summary = engine.fold(summary, event)
        summary = engine.rebuild(user_id, history)
    """

    def __init__(self, aggregators: Optional[Sequence[SummaryAggregator]] = None):
        self._aggregators: List[SummaryAggregator] = list(aggregators) if aggregators else [
            TotalsAccumulator(),
            DailyBucketer(),
            WeeklyWindowSummarizer(),
            StreakTracker(),
        ]

    @property
    def aggregators(self) -> List[SummaryAggregator]:
        return list(self._aggregators)

    def fold(self, summary: AnalyticsSummary, event: WorkoutEvent) -> AnalyticsSummary:
        """
        Fold one new event into a summary.

        The input summary is left unchanged; all aggregators update a
        copy, so a failure midway never leaves a partially updated
        summary behind.

        Args:
            summary: Existing summary (use AnalyticsSummary.empty for a first workout)
            event: The newly recorded workout

        Returns:
            Updated summary
        """
        updated = copy.deepcopy(summary)
        self._apply(updated, event)

        logger.debug(
            "Folded workout event",
            user_id=summary.user_id,
            event_id=event.id,
            streak=updated.streak.current,
            workout_count=updated.totals.workout_count,
        )

        return updated

    def rebuild(self, user_id: str, events: Iterable[WorkoutEvent]) -> AnalyticsSummary:
        """
        Recompute a summary from a user's complete history.

        Events are sorted ascending by timestamp and folded from an
        empty summary with the same per-event fold used by fold(), so
        the result equals folding the same events one at a time.

        Args:
            user_id: Owner of the history
            events: Full history, in any order

        Returns:
            Fresh summary
        """
        ordered = sort_events(events)
        summary = AnalyticsSummary.empty(user_id)

        for event in ordered:
            self._apply(summary, event)

        logger.info(
            "Rebuilt analytics summary",
            user_id=user_id,
            event_count=len(ordered),
            workout_count=summary.totals.workout_count,
            streak=summary.streak.current,
            longest_streak=summary.streak.longest,
        )

        return summary

    def _apply(self, summary: AnalyticsSummary, event: WorkoutEvent) -> None:
        """Run one event through every aggregator, in place."""
        for aggregator in self._aggregators:
            aggregator.apply(summary, event)
        summary.last_workout_at = event.occurred_at
