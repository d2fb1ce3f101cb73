"""
Message lifecycle listener.

Writes an audit record for every message event. Wiring happens in two
steps: build the listener, then hand registrations() to the dispatcher.
The names in registrations() are the ones the delivery log is checked
against, so they must be passed to subscribe() unchanged.
"""

from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from ...domain.entities import Event
from ...domain.value_objects import EventType
from ..ports.outbound import EventListenerLogRepository
from ..services.event_dispatcher import EventHandler


class MessageListener:
    """Audits message events, at most once per event."""

    def __init__(
        self,
        log_repository: EventListenerLogRepository,
        logger: Any = None,
        name: str = "MessageListener",
    ) -> None:
        self._log_repository = log_repository
        self._name = name
        base = logger or structlog.get_logger()
        self._logger = base.bind(component="message_listener")
        self._audit = base.bind(component="audit")

    def handler_name(self, handler: str) -> str:
        """Delivery log name of one of this listener's handlers."""
        return f"{self._name}.{handler}"

    def registrations(self) -> list[tuple[EventType, EventHandler, str]]:
        handlers = [
            (EventType.MESSAGE_CREATED, self.on_message_created),
            (EventType.MESSAGE_SENT, self.on_message_sent),
            (EventType.MESSAGE_DELIVERED, self.on_message_delivered),
            (EventType.MESSAGE_FAILED, self.on_message_failed),
        ]
        return [
            (event_type, handler, self.handler_name(handler.__name__))
            for event_type, handler in handlers
        ]

    async def on_message_created(self, event: Event) -> None:
        await self._once(event, "on_message_created", self._audit_created)

    async def on_message_sent(self, event: Event) -> None:
        await self._once(event, "on_message_sent", self._audit_transition)

    async def on_message_delivered(self, event: Event) -> None:
        await self._once(event, "on_message_delivered", self._audit_transition)

    async def on_message_failed(self, event: Event) -> None:
        await self._once(event, "on_message_failed", self._audit_transition)

    async def _once(
        self,
        event: Event,
        handler: str,
        action: Callable[[Event], Awaitable[None]],
    ) -> None:
        name = self.handler_name(handler)
        if await self._log_repository.has_succeeded(event.id, name):
            self._logger.info(
                "Event already handled, skipping",
                event_id=str(event.id),
                event_type=event.type.value,
                listener=name,
            )
            return
        await action(event)

    async def _audit_created(self, event: Event) -> None:
        payload = event.payload
        if "message_id" not in payload:
            raise ValueError(f"event {event.id} has no message_id")
        self._audit.info(
            "Message created",
            event_id=str(event.id),
            message_id=payload["message_id"],
            owner=payload.get("owner"),
            contact=payload.get("contact"),
        )

    async def _audit_transition(self, event: Event) -> None:
        payload = event.payload
        if "message_id" not in payload:
            raise ValueError(f"event {event.id} has no message_id")
        self._audit.info(
            "Message status changed",
            event_id=str(event.id),
            message_id=payload["message_id"],
            owner=payload.get("owner"),
            previous_status=payload.get("previous_status"),
            status=payload.get("status"),
            reason=payload.get("reason"),
        )
