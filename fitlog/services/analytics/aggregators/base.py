"""
Base Aggregator - Abstract interface for one piece of derived analytics state.
"""
from abc import ABC, abstractmethod

from fitlog.services.analytics.summary import AnalyticsSummary, WorkoutEvent


class SummaryAggregator(ABC):
    """
    Abstract base class for a summary sub-component.

    Each aggregator owns one slice of AnalyticsSummary and reads only
    that slice, so the order in which aggregators see an event does
    not matter. All aggregators must see the same event.
    """

    name: str = "unknown"

    @abstractmethod
    def apply(self, summary: AnalyticsSummary, event: WorkoutEvent) -> None:
        """
        Fold one event into the summary in place.

        Args:
            summary: Summary to update (owned by the caller)
            event: Validated workout event
        """
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
