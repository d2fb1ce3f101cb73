"""Message DTOs.

Shape and type checks live here; business rules live in MessageValidator.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...domain.entities import Message, MessageStatus
from ...domain.value_objects import MessageContent, PhoneNumber
from .params import MessageOutstandingParams, MessageSendParams, MessageStatusParams

T = TypeVar("T")


class SendMessageDTO(BaseModel):
    """DTO for queueing a new SMS."""

    model_config = ConfigDict(populate_by_name=True)

    owner: str = Field(..., alias="from", min_length=1, max_length=20)
    contact: str = Field(..., alias="to", min_length=1, max_length=20)
    content: str = Field(..., max_length=4096)

    @field_validator("owner", "contact", mode="after")
    @classmethod
    def strip_phone_number(cls, v: str) -> str:
        return v.strip()

    def to_params(self, request_url: str) -> MessageSendParams:
        return MessageSendParams(
            owner=PhoneNumber(self.owner),
            contact=PhoneNumber(self.contact),
            content=MessageContent(self.content),
            request_url=request_url,
        )


class OutstandingMessagesDTO(BaseModel):
    """DTO for the phone's outstanding messages poll."""

    take: int | None = None
    owner: str | None = None

    def to_params(self, request_url: str, default_take: int = 1) -> MessageOutstandingParams:
        return MessageOutstandingParams(
            take=default_take if self.take is None else self.take,
            request_url=request_url,
            owner=PhoneNumber(self.owner) if self.owner else None,
        )


class UpdateMessageStatusDTO(BaseModel):
    """DTO for the phone reporting what happened to a message."""

    status: str
    reason: str | None = Field(default=None, max_length=1024)

    def to_params(self, message_id: UUID) -> MessageStatusParams:
        return MessageStatusParams(
            message_id=message_id,
            status=MessageStatus(self.status),
            reason=self.reason,
        )


class MessageResponseDTO(BaseModel):
    """DTO for message response."""

    id: UUID
    owner: str
    contact: str
    content: str
    status: str
    request_url: str
    created_at: datetime
    updated_at: datetime
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    failed_at: datetime | None = None
    failure_reason: str | None = None

    @classmethod
    def from_entity(cls, message: Message) -> "MessageResponseDTO":
        return cls(
            id=message.id,
            owner=str(message.owner),
            contact=str(message.contact),
            content=message.content.text,
            status=message.status.value,
            request_url=message.request_url,
            created_at=message.created_at,
            updated_at=message.updated_at,
            sent_at=message.sent_at,
            delivered_at=message.delivered_at,
            failed_at=message.failed_at,
            failure_reason=message.failure_reason,
        )


class ResponseEnvelope(BaseModel, Generic[T]):
    """Envelope wrapping every API response."""

    status: str = "success"
    message: str
    data: T | None = None


def error_envelope(message: str, data: Any = None) -> dict[str, Any]:
    return {"status": "error", "message": message, "data": data}
