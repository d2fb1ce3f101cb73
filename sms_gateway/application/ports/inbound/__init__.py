from .get_outstanding import GetOutstandingMessagesUseCase
from .message_lifecycle import GetMessageUseCase, UpdateMessageStatusUseCase
from .send_message import SendMessageUseCase

__all__ = [
    "GetMessageUseCase",
    "GetOutstandingMessagesUseCase",
    "SendMessageUseCase",
    "UpdateMessageStatusUseCase",
]
