from .message_dto import (
    MessageResponseDTO,
    OutstandingMessagesDTO,
    ResponseEnvelope,
    SendMessageDTO,
    UpdateMessageStatusDTO,
    error_envelope,
)
from .params import MessageOutstandingParams, MessageSendParams, MessageStatusParams

__all__ = [
    "MessageOutstandingParams",
    "MessageResponseDTO",
    "MessageSendParams",
    "MessageStatusParams",
    "OutstandingMessagesDTO",
    "ResponseEnvelope",
    "SendMessageDTO",
    "UpdateMessageStatusDTO",
    "error_envelope",
]
