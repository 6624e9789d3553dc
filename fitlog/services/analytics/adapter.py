"""
Event Adapters - Turn workout sources into analytics events.

Supported sources:
- Stored workout logs (ORM rows)
"""
from abc import ABC, abstractmethod
from typing import Any, Dict

from fitlog.core.logging import get_logger
from fitlog.models.workout import WorkoutLog
from fitlog.services.analytics.summary import WorkoutEvent

logger = get_logger(__name__)


class EventAdapter(ABC):
    """Abstract base class for workout event adapters."""

    source_name: str = "unknown"

    @abstractmethod
    def to_event(self, raw: Any) -> WorkoutEvent:
        """
        Convert a source object to a WorkoutEvent.

        Args:
            raw: Source object

        Returns:
            WorkoutEvent

        Raises:
            ValueError: If required fields are missing or invalid
        """
        pass


class WorkoutLogAdapter(EventAdapter):
    """Adapter for stored WorkoutLog rows."""

    source_name = "workout_log"

    def to_event(self, raw: WorkoutLog) -> WorkoutEvent:
        return WorkoutEvent(
            id=str(raw.id),
            user_id=str(raw.user_id),
            occurred_at=raw.created_at,
            duration=raw.duration or 0,
            calories_burned=raw.calories_burned,
        )


_ADAPTERS: Dict[str, EventAdapter] = {
    WorkoutLogAdapter.source_name: WorkoutLogAdapter(),
}


def get_adapter(source: str) -> EventAdapter:
    """
    Get the adapter for a source.

    Args:
        source: Source name (workout_log)

    Returns:
        EventAdapter instance

    Raises:
        ValueError: If no adapter handles the source
    """
    adapter = _ADAPTERS.get(source)
    if adapter is None:
        logger.warning("Unknown event source", source=source)
        raise ValueError(f"Unknown event source: {source}")
    return adapter
