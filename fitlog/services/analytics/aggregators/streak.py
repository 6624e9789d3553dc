"""
Streak Tracker - Consecutive-day workout streak.

A state machine over calendar days rather than events: any number of
workouts on one day contribute a single day to the streak.

Transitions for a new workout day d:
- no counted day yet         -> streak = 1
- d == last counted day      -> unchanged
- d == last counted day + 1  -> streak + 1
- anything else              -> streak = 1 (gap, or d earlier than the
                                last counted day)

The longest streak is raised to the current streak after every
transition and never decreases.
"""
from datetime import date, timedelta

from fitlog.services.analytics.aggregators.base import SummaryAggregator
from fitlog.services.analytics.summary import (
    AnalyticsSummary,
    StreakState,
    WorkoutEvent,
)


ONE_DAY = timedelta(days=1)


def advance_streak(state: StreakState, day: date) -> StreakState:
    """
    Compute the streak state after a workout on `day`.

    Args:
        state: Streak before the workout
        day: Calendar day of the workout

    Returns:
        New StreakState (the input is not modified)
    """
    last = state.last_counted_day

    if last is None:
        current = 1
    elif day == last:
        return StreakState(
            current=state.current,
            longest=max(state.longest, state.current),
            last_counted_day=last,
        )
    elif day == last + ONE_DAY:
        current = state.current + 1
    else:
        current = 1

    return StreakState(
        current=current,
        longest=max(state.longest, current),
        last_counted_day=day,
    )


def is_out_of_order(state: StreakState, day: date) -> bool:
    """Check if a workout day precedes the last counted day."""
    return state.last_counted_day is not None and day < state.last_counted_day


class StreakTracker(SummaryAggregator):
    """
    Tracks the current and longest consecutive-day streak.

    Events must be folded in ascending timestamp order. A day earlier
    than the last counted day resets the streak to 1, which is only
    meaningful for ordered input; callers that backfill past workouts
    should rebuild instead.
    """

    name = "streak"

    def apply(self, summary: AnalyticsSummary, event: WorkoutEvent) -> None:
        summary.streak = advance_streak(summary.streak, event.day)
