from typing import Any
from uuid import UUID

import structlog

from ...domain.entities import Event, Message, MessageStatus
from ...domain.value_objects import EventType
from ..dtos import MessageOutstandingParams, MessageSendParams, MessageStatusParams
from ..exceptions import MessageNotFoundError, PersistenceError
from ..ports.inbound import (
    GetMessageUseCase,
    GetOutstandingMessagesUseCase,
    SendMessageUseCase,
    UpdateMessageStatusUseCase,
)
from ..ports.outbound import MessageRepository
from .event_dispatcher import EventDispatcher

DEFAULT_TAKE_MAX = 10

_STATUS_EVENTS = {
    MessageStatus.SENT: EventType.MESSAGE_SENT,
    MessageStatus.DELIVERED: EventType.MESSAGE_DELIVERED,
    MessageStatus.FAILED: EventType.MESSAGE_FAILED,
}


class MessageService(
    SendMessageUseCase,
    GetOutstandingMessagesUseCase,
    GetMessageUseCase,
    UpdateMessageStatusUseCase,
):
    """
    Application service for the message lifecycle.

    The only writer of Message.status. Every call round-trips through the
    repository; nothing is cached between calls.
    """

    def __init__(
        self,
        repository: MessageRepository,
        dispatcher: EventDispatcher,
        take_max: int = DEFAULT_TAKE_MAX,
        logger: Any = None,
    ) -> None:
        self._repository = repository
        self._dispatcher = dispatcher
        self._take_max = take_max
        self._logger = (logger or structlog.get_logger()).bind(component="message_service")

    async def send_message(self, params: MessageSendParams) -> Message:
        """Store a pending message, then publish message.created."""
        message = Message.create(
            owner=params.owner,
            contact=params.contact,
            content=params.content,
            request_url=params.request_url,
        )

        try:
            message = await self._repository.create(message)
        except PersistenceError:
            self._logger.error(
                "Cannot store message",
                message_id=str(message.id),
                request_url=params.request_url,
                exc_info=True,
            )
            raise

        await self._dispatcher.publish(
            Event.create(
                EventType.MESSAGE_CREATED,
                {
                    "message_id": str(message.id),
                    "owner": str(message.owner),
                    "contact": str(message.contact),
                },
            )
        )

        self._logger.info(
            "Message queued",
            message_id=str(message.id),
            owner=str(message.owner),
        )
        return message

    async def get_outstanding(self, params: MessageOutstandingParams) -> list[Message]:
        """Get pending messages for the phone, oldest first."""
        take = self.clamp_take(params.take)

        try:
            messages = await self._repository.find_outstanding(params.owner, take)
        except PersistenceError:
            self._logger.error(
                "Cannot fetch outstanding messages",
                owner=str(params.owner) if params.owner else None,
                take=take,
                request_url=params.request_url,
                exc_info=True,
            )
            raise

        self._logger.debug("Fetched outstanding messages", count=len(messages), take=take)
        return messages

    def clamp_take(self, take: int) -> int:
        return max(1, min(take, self._take_max))

    async def get_message(self, message_id: UUID) -> Message:
        message = await self._repository.get_by_id(message_id)
        if message is None:
            raise MessageNotFoundError(message_id)
        return message

    async def update_status(self, params: MessageStatusParams) -> Message:
        """Apply a lifecycle transition and publish the matching event."""
        message = await self.get_message(params.message_id)
        previous = message.status

        message.transition_to(params.status, reason=params.reason)
        message = await self._repository.update(message, expected_status=previous)

        payload = {
            "message_id": str(message.id),
            "owner": str(message.owner),
            "previous_status": previous.value,
            "status": message.status.value,
        }
        if message.failure_reason:
            payload["reason"] = message.failure_reason
        event = Event.create(_STATUS_EVENTS[message.status], payload)
        try:
            await self._dispatcher.publish(event)
        except PersistenceError:
            # Status is already committed
            self._logger.error(
                "Status updated but event not stored",
                message_id=str(message.id),
                event_id=str(event.id),
                status=message.status.value,
                exc_info=True,
            )

        self._logger.info(
            "Message status updated",
            message_id=str(message.id),
            previous_status=previous.value,
            status=message.status.value,
        )
        return message
