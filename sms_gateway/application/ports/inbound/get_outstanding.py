from abc import ABC, abstractmethod

from ....domain.entities import Message
from ...dtos import MessageOutstandingParams


class GetOutstandingMessagesUseCase(ABC):
    """Input port for the phone polling for work."""

    @abstractmethod
    async def get_outstanding(self, params: MessageOutstandingParams) -> list[Message]:
        """Get messages the phone still has to send."""
        ...
