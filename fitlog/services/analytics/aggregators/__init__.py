"""
Summary aggregators.

Each aggregator folds a workout event into one slice of the
AnalyticsSummary.
"""
from fitlog.services.analytics.aggregators.base import SummaryAggregator
from fitlog.services.analytics.aggregators.daily import DailyBucketer
from fitlog.services.analytics.aggregators.streak import (
    StreakTracker,
    advance_streak,
    is_out_of_order,
)
from fitlog.services.analytics.aggregators.totals import TotalsAccumulator
from fitlog.services.analytics.aggregators.weekly import WeeklyWindowSummarizer

__all__ = [
    "SummaryAggregator",
    "TotalsAccumulator",
    "DailyBucketer",
    "WeeklyWindowSummarizer",
    "StreakTracker",
    "advance_streak",
    "is_out_of_order",
]
