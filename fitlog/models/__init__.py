from fitlog.models.workout import WorkoutLog
from fitlog.models.analytics import UserAnalytics

__all__ = [
    "WorkoutLog",
    "UserAnalytics",
]
