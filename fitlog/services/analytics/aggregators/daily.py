"""
Daily Bucketer - Per-calendar-day rollups.
"""
from fitlog.services.analytics.aggregators.base import SummaryAggregator
from fitlog.services.analytics.summary import (
    AnalyticsSummary,
    DailyBucket,
    WorkoutEvent,
)


class DailyBucketer(SummaryAggregator):
    """
    Maintains one DailyBucket per calendar day with at least one workout.

    Buckets are matched by exact calendar day, created on the first
    workout of the day, and never removed. Workout ids are appended in
    processing order, so workouts with identical timestamps keep the
    order the caller presents them in.
    """

    name = "daily"

    def apply(self, summary: AnalyticsSummary, event: WorkoutEvent) -> None:
        day = event.day
        bucket = summary.bucket_for(day)

        if bucket is None:
            summary.daily.append(
                DailyBucket(
                    date=day,
                    workout_count=1,
                    total_duration=event.duration,
                    calories_burned=event.calories,
                    workout_ids=[event.id],
                )
            )
            return

        bucket.workout_count += 1
        bucket.total_duration += event.duration
        bucket.calories_burned += event.calories
        bucket.workout_ids.append(event.id)
