from abc import ABC, abstractmethod
from uuid import UUID

from ....domain.entities import Message
from ...dtos import MessageStatusParams


class GetMessageUseCase(ABC):
    """Input port for retrieving message details."""

    @abstractmethod
    async def get_message(self, message_id: UUID) -> Message:
        ...


class UpdateMessageStatusUseCase(ABC):
    """Input port for moving a message along its lifecycle."""

    @abstractmethod
    async def update_status(self, params: MessageStatusParams) -> Message:
        ...
