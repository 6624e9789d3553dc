"""
Services module - Application business logic layer.

Modules:
- analytics: Workout aggregation, streaks and summary storage
"""
from fitlog.services.analytics import AnalyticsEngine, AnalyticsService

__all__ = [
    "AnalyticsEngine",
    "AnalyticsService",
]
