from abc import ABC, abstractmethod
from uuid import UUID

from ....domain.entities import Message, MessageStatus
from ....domain.value_objects import PhoneNumber


class MessageRepository(ABC):
    """Output port for message persistence."""

    @abstractmethod
    async def create(self, message: Message) -> Message:
        """Persist a new message."""
        ...

    @abstractmethod
    async def get_by_id(self, message_id: UUID) -> Message | None:
        """Retrieve a message by ID."""
        ...

    @abstractmethod
    async def update(
        self, message: Message, expected_status: MessageStatus | None = None
    ) -> Message:
        """Persist changes to an existing message.

        When expected_status is given the write only applies if the stored row
        still has that status, otherwise ConcurrentUpdateError is raised.
        """
        ...

    @abstractmethod
    async def find_outstanding(self, owner: PhoneNumber | None, limit: int) -> list[Message]:
        """Get pending messages, oldest first, optionally scoped to an owner."""
        ...
