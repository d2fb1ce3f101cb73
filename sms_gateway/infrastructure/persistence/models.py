from datetime import UTC, datetime
from typing import Any, overload
from uuid import UUID

from sqlalchemy import JSON, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ...domain.entities import (
    Event,
    EventListenerLog,
    EventListenerLogStatus,
    Message,
    MessageStatus,
)
from ...domain.value_objects import EventType, MessageContent, PhoneNumber


def _naive_utc(dt: datetime | None) -> datetime | None:
    """Strip timezone info for storage in TIMESTAMP WITHOUT TIME ZONE columns."""
    if dt is None:
        return None
    return dt.astimezone(UTC).replace(tzinfo=None)


@overload
def _aware_utc(dt: datetime) -> datetime: ...


@overload
def _aware_utc(dt: None) -> None: ...


def _aware_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC timezone to naive datetimes read from the database."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


class Base(DeclarativeBase):
    pass


class MessageModel(Base):
    """SQLAlchemy model for Message entity."""

    __tablename__ = "messages"
    __table_args__ = (
        # Serves the outstanding poll: status filter, owner scope, oldest first
        Index("ix_messages_outstanding", "status", "owner", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    owner: Mapped[str] = mapped_column(String(20), nullable=False)
    contact: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    request_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime)
    failed_at: Mapped[datetime | None] = mapped_column(DateTime)
    failure_reason: Mapped[str | None] = mapped_column(Text)

    @classmethod
    def from_entity(cls, message: Message) -> "MessageModel":
        """Convert domain entity to ORM model."""
        model = cls(id=message.id)
        model.apply(message)
        return model

    def apply(self, message: Message) -> None:
        self.owner = str(message.owner)
        self.contact = str(message.contact)
        self.content = message.content.text
        self.status = message.status.value
        self.request_url = message.request_url
        self.created_at = _naive_utc(message.created_at)
        self.updated_at = _naive_utc(message.updated_at)
        self.sent_at = _naive_utc(message.sent_at)
        self.delivered_at = _naive_utc(message.delivered_at)
        self.failed_at = _naive_utc(message.failed_at)
        self.failure_reason = message.failure_reason

    def to_entity(self) -> Message:
        """Convert ORM model to domain entity."""
        return Message(
            id=self.id,
            owner=PhoneNumber(self.owner),
            contact=PhoneNumber(self.contact),
            content=MessageContent(self.content),
            status=MessageStatus(self.status),
            request_url=self.request_url,
            created_at=_aware_utc(self.created_at),
            updated_at=_aware_utc(self.updated_at),
            sent_at=_aware_utc(self.sent_at),
            delivered_at=_aware_utc(self.delivered_at),
            failed_at=_aware_utc(self.failed_at),
            failure_reason=self.failure_reason,
        )


class EventModel(Base):
    """SQLAlchemy model for stored events. Rows are insert-only."""

    __tablename__ = "events"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    @classmethod
    def from_entity(cls, event: Event) -> "EventModel":
        return cls(
            id=event.id,
            type=event.type.value,
            payload=event.payload_dict(),
            created_at=_naive_utc(event.created_at),
        )

    def to_entity(self) -> Event:
        return Event(
            type=EventType(self.type),
            payload=self.payload,
            id=self.id,
            created_at=_aware_utc(self.created_at),
        )


class EventListenerLogModel(Base):
    """SQLAlchemy model for event delivery attempts.

    event_id is a plain column, not a foreign key: logs outlive their events.
    """

    __tablename__ = "event_listener_logs"
    __table_args__ = (Index("ix_event_listener_logs_event_listener", "event_id", "listener_name"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    event_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    listener_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    error: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    @classmethod
    def from_entity(cls, log: EventListenerLog) -> "EventListenerLogModel":
        return cls(
            id=log.id,
            event_id=log.event_id,
            event_type=log.event_type.value,
            listener_name=log.listener_name,
            status=log.status.value,
            error=log.error,
            created_at=_naive_utc(log.created_at),
            updated_at=_naive_utc(log.updated_at),
        )

    def to_entity(self) -> EventListenerLog:
        return EventListenerLog(
            id=self.id,
            event_id=self.event_id,
            event_type=EventType(self.event_type),
            listener_name=self.listener_name,
            status=EventListenerLogStatus(self.status),
            error=self.error,
            created_at=_aware_utc(self.created_at),
            updated_at=_aware_utc(self.updated_at),
        )
