"""
Totals Accumulator - Running workout count, duration and calories.
"""
from fitlog.services.analytics.aggregators.base import SummaryAggregator
from fitlog.services.analytics.summary import AnalyticsSummary, WorkoutEvent


class TotalsAccumulator(SummaryAggregator):
    """
    Sums over every folded workout.

    Commutative and associative, so fold order does not change the
    result.
    """

    name = "totals"

    def apply(self, summary: AnalyticsSummary, event: WorkoutEvent) -> None:
        totals = summary.totals
        totals.workout_count += 1
        totals.total_duration += event.duration
        totals.total_calories_burned += event.calories
