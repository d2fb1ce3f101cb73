from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from ..exceptions import InvalidStatusTransitionError
from ..value_objects import MessageContent, PhoneNumber


class MessageStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"


# Allowed status moves; anything else is rejected by Message.transition_to
_TRANSITIONS: dict[MessageStatus, frozenset[MessageStatus]] = {
    MessageStatus.PENDING: frozenset({MessageStatus.SENT, MessageStatus.FAILED}),
    MessageStatus.SENT: frozenset({MessageStatus.DELIVERED, MessageStatus.FAILED}),
    MessageStatus.DELIVERED: frozenset(),
    MessageStatus.FAILED: frozenset(),
}


@dataclass
class Message:
    """SMS message aggregate root."""

    id: UUID
    owner: PhoneNumber
    contact: PhoneNumber
    content: MessageContent
    status: MessageStatus
    request_url: str
    created_at: datetime
    updated_at: datetime
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    failed_at: datetime | None = None
    failure_reason: str | None = None

    @classmethod
    def create(
        cls,
        owner: PhoneNumber,
        contact: PhoneNumber,
        content: MessageContent,
        request_url: str,
    ) -> "Message":
        """Factory method for a new message waiting to be picked up by the phone."""
        now = datetime.now(UTC)
        return cls(
            id=uuid4(),
            owner=owner,
            contact=contact,
            content=content,
            status=MessageStatus.PENDING,
            request_url=request_url,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_outstanding(self) -> bool:
        return self.status == MessageStatus.PENDING

    def can_transition_to(self, status: MessageStatus) -> bool:
        return status in _TRANSITIONS[self.status]

    def transition_to(self, status: MessageStatus, reason: str | None = None) -> None:
        """Move the message along its lifecycle, stamping the matching timestamp."""
        if not self.can_transition_to(status):
            raise InvalidStatusTransitionError("message", self.status.value, status.value)

        now = datetime.now(UTC)
        if status == MessageStatus.SENT:
            self.sent_at = now
        elif status == MessageStatus.DELIVERED:
            self.delivered_at = now
        elif status == MessageStatus.FAILED:
            self.failed_at = now
            self.failure_reason = reason

        self.status = status
        self.updated_at = now
