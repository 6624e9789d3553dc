"""
Weekly Window Summarizer - Rollup for the current Sunday-Saturday week.
"""
from fitlog.services.analytics.aggregators.base import SummaryAggregator
from fitlog.services.analytics.summary import (
    AnalyticsSummary,
    WeeklyWindow,
    WorkoutEvent,
    week_bounds,
)


class WeeklyWindowSummarizer(SummaryAggregator):
    """
    Keeps a single live weekly window: the week of the last folded event.

    When an event lands in a different week than the live window, the
    window is replaced wholesale and seeded from that event. Earlier
    weeks are not retained, so the window only ever describes the week
    of the most recently folded workout.
    """

    name = "weekly"

    def apply(self, summary: AnalyticsSummary, event: WorkoutEvent) -> None:
        start, end = week_bounds(event.day)
        window = summary.weekly

        if window is None or window.start_date != start:
            summary.weekly = WeeklyWindow(
                start_date=start,
                end_date=end,
                workout_count=1,
                total_duration=event.duration,
                calories_burned=event.calories,
                workout_ids=[event.id],
            )
            return

        window.workout_count += 1
        window.total_duration += event.duration
        window.calories_burned += event.calories
        window.workout_ids.append(event.id)
