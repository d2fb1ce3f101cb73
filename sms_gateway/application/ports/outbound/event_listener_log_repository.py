from abc import ABC, abstractmethod
from uuid import UUID

from ....domain.entities import EventListenerLog


class EventListenerLogRepository(ABC):
    """Output port for the event delivery log."""

    @abstractmethod
    async def create(self, log: EventListenerLog) -> EventListenerLog:
        """Store a new delivery attempt."""
        ...

    @abstractmethod
    async def update(self, log: EventListenerLog) -> None:
        """Record the outcome of a delivery attempt."""
        ...

    @abstractmethod
    async def has_succeeded(self, event_id: UUID, listener_name: str) -> bool:
        """Whether the listener already handled the event successfully."""
        ...

    @abstractmethod
    async def list_for_event(self, event_id: UUID) -> list[EventListenerLog]:
        """All delivery attempts for an event, oldest first."""
        ...
