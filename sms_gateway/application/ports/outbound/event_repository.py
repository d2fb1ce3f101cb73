from abc import ABC, abstractmethod

from ....domain.entities import Event


class EventRepository(ABC):
    """Output port for the append-only event store."""

    @abstractmethod
    async def create(self, event: Event) -> Event:
        """Store a published event.

        Storing an event whose id is already present is a no-op that returns
        the stored copy, so an event can be published again.
        """
        ...
