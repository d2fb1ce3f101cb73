from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from ..exceptions import InvalidStatusTransitionError
from ..value_objects import EventType


class EventListenerLogStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class EventListenerLog:
    """One attempt at delivering an event to a single listener."""

    id: UUID
    event_id: UUID
    event_type: EventType
    listener_name: str
    status: EventListenerLogStatus
    created_at: datetime
    updated_at: datetime
    error: str | None = None

    @classmethod
    def start(cls, event_id: UUID, event_type: EventType, listener_name: str) -> "EventListenerLog":
        """Factory method for the row written before a listener is invoked."""
        now = datetime.now(UTC)
        return cls(
            id=uuid4(),
            event_id=event_id,
            event_type=event_type,
            listener_name=listener_name,
            status=EventListenerLogStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    def mark_succeeded(self) -> None:
        self._finish(EventListenerLogStatus.SUCCESS)

    def mark_failed(self, error: str) -> None:
        self._finish(EventListenerLogStatus.FAILED, error or "unknown error")

    def _finish(self, status: EventListenerLogStatus, error: str | None = None) -> None:
        if self.status != EventListenerLogStatus.PENDING:
            raise InvalidStatusTransitionError("listener log", self.status.value, status.value)
        self.status = status
        self.error = error
        self.updated_at = datetime.now(UTC)
