"""
Analytics error types.

Every failure at the storage boundary surfaces to callers as an
AggregationError: the summary was not updated.
"""


class AggregationError(Exception):
    """Aggregation failed, summary not updated."""

    def __init__(self, user_id: str, message: str = "Aggregation failed, summary not updated"):
        super().__init__(f"{message} (user={user_id})")
        self.user_id = user_id


class SummaryLoadError(AggregationError):
    """The summary store could not be read."""

    def __init__(self, user_id: str):
        super().__init__(user_id, "Failed to load analytics summary")


class SummarySaveError(AggregationError):
    """The summary store rejected the write."""

    def __init__(self, user_id: str):
        super().__init__(user_id, "Failed to save analytics summary")


class HistoryLoadError(AggregationError):
    """The workout history could not be read for a rebuild."""

    def __init__(self, user_id: str):
        super().__init__(user_id, "Failed to load workout history")
