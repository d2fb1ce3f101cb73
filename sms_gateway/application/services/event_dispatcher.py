"""
In-process event dispatcher.

Events are stored first, then fanned out to every subscribed handler in
registration order. Each handler invocation is bracketed by a delivery log
row: written as pending before the call, then updated to success or failed.
A failing handler is recorded and skipped over; only a failed event store
write is reported back to the publisher.

Publishing an event that is already stored delivers it again, appending a
new log row per handler. This is how a failed delivery is retried.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from ...domain.entities import Event, EventListenerLog, EventListenerLogStatus
from ...domain.value_objects import EventType
from ..exceptions import PersistenceError
from ..ports.outbound import EventListenerLogRepository, EventRepository

EventHandler = Callable[[Event], Awaitable[None]]


@dataclass(frozen=True)
class Subscription:
    """A handler registered for one event type."""

    name: str
    handler: EventHandler


def listener_name(handler: EventHandler) -> str:
    """Name recorded in the delivery log for a handler."""
    return getattr(handler, "__qualname__", None) or type(handler).__qualname__


class EventDispatcher:
    """Routes published events to subscribed handlers and records each delivery."""

    def __init__(
        self,
        event_repository: EventRepository,
        log_repository: EventListenerLogRepository,
        logger: Any = None,
    ) -> None:
        self._event_repository = event_repository
        self._log_repository = log_repository
        self._logger = (logger or structlog.get_logger()).bind(component="event_dispatcher")
        self._subscriptions: dict[EventType, list[Subscription]] = {}

    def subscribe(
        self,
        event_type: EventType,
        handler: EventHandler,
        name: str | None = None,
    ) -> None:
        """Register a handler for an event type. Registering it twice is a no-op."""
        subscriptions = self._subscriptions.setdefault(event_type, [])
        if any(s.handler == handler for s in subscriptions):
            self._logger.debug(
                "Handler already subscribed",
                event_type=event_type.value,
                listener=name or listener_name(handler),
            )
            return

        subscription = Subscription(name=name or listener_name(handler), handler=handler)
        subscriptions.append(subscription)
        self._logger.info(
            "Handler subscribed",
            event_type=event_type.value,
            listener=subscription.name,
            position=len(subscriptions),
        )

    def subscriptions(self, event_type: EventType) -> list[Subscription]:
        return list(self._subscriptions.get(event_type, ()))

    async def publish(self, event: Event) -> Event:
        """Store the event and deliver it to every subscribed handler."""
        log = self._logger.bind(event_id=str(event.id), event_type=event.type.value)

        try:
            stored = await self._event_repository.create(event)
        except PersistenceError:
            log.error("Cannot store event", exc_info=True)
            raise

        # Copy so subscriptions added mid-dispatch do not affect this event
        subscriptions = tuple(self._subscriptions.get(stored.type, ()))
        if not subscriptions:
            log.debug("No handlers subscribed")
            return stored

        succeeded = 0
        for subscription in subscriptions:
            if await self._deliver(stored, subscription, log):
                succeeded += 1

        log.info(
            "Event dispatched",
            handlers=len(subscriptions),
            succeeded=succeeded,
            failed=len(subscriptions) - succeeded,
        )
        return stored

    async def _deliver(self, event: Event, subscription: Subscription, log: Any) -> bool:
        log = log.bind(listener=subscription.name)

        try:
            entry = await self._log_repository.create(
                EventListenerLog.start(event.id, event.type, subscription.name)
            )
        except PersistenceError:
            log.error("Cannot record delivery attempt, skipping handler", exc_info=True)
            return False

        try:
            await subscription.handler(event)
        except Exception as e:
            entry.mark_failed(f"{type(e).__name__}: {e}")
            log.warning(
                "Handler failed",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
        else:
            entry.mark_succeeded()

        try:
            await self._log_repository.update(entry)
        except PersistenceError:
            log.error(
                "Cannot record delivery outcome",
                outcome=entry.status.value,
                exc_info=True,
            )

        return entry.status == EventListenerLogStatus.SUCCESS
