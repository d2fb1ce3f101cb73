from dataclasses import dataclass
from uuid import UUID

from ...domain.entities import MessageStatus
from ...domain.value_objects import MessageContent, PhoneNumber


@dataclass(frozen=True)
class MessageSendParams:
    """Validated input for MessageService.send_message."""

    owner: PhoneNumber
    contact: PhoneNumber
    content: MessageContent
    request_url: str


@dataclass(frozen=True)
class MessageOutstandingParams:
    """Validated input for MessageService.get_outstanding."""

    take: int
    request_url: str
    owner: PhoneNumber | None = None


@dataclass(frozen=True)
class MessageStatusParams:
    """Validated input for MessageService.update_status."""

    message_id: UUID
    status: MessageStatus
    reason: str | None = None
