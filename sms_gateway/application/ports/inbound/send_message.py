from abc import ABC, abstractmethod

from ....domain.entities import Message
from ...dtos import MessageSendParams


class SendMessageUseCase(ABC):
    """Input port for queueing a message for the phone."""

    @abstractmethod
    async def send_message(self, params: MessageSendParams) -> Message:
        """Store a pending message and announce it."""
        ...
