from unittest.mock import AsyncMock

import pytest

from sms_gateway.application.listeners import MessageListener
from sms_gateway.application.services import EventDispatcher
from sms_gateway.domain.entities import Event
from sms_gateway.domain.value_objects import EventType


class TestMessageListener:
    @pytest.fixture
    def log_repository(self):
        repository = AsyncMock()
        repository.has_succeeded.return_value = False
        return repository

    @pytest.fixture
    def listener(self, log_repository, mock_logger):
        return MessageListener(log_repository, logger=mock_logger)

    @pytest.fixture
    def created_event(self):
        return Event.create(
            EventType.MESSAGE_CREATED,
            {"message_id": "m1", "owner": "+18005550100", "contact": "+18005550199"},
        )

    def test_registrations_cover_every_message_event(self, listener):
        registered = [event_type for event_type, _, _ in listener.registrations()]

        assert registered == [
            EventType.MESSAGE_CREATED,
            EventType.MESSAGE_SENT,
            EventType.MESSAGE_DELIVERED,
            EventType.MESSAGE_FAILED,
        ]

    def test_registrations_wire_into_dispatcher(self, listener, mock_logger):
        dispatcher = EventDispatcher(AsyncMock(), AsyncMock(), logger=mock_logger)

        for event_type, handler, name in listener.registrations():
            dispatcher.subscribe(event_type, handler, name=name)

        names = [s.name for s in dispatcher.subscriptions(EventType.MESSAGE_CREATED)]
        assert names == ["MessageListener.on_message_created"]

    @pytest.mark.asyncio
    async def test_custom_name_is_used_for_delivery_log_lookup(
        self, log_repository, mock_logger, created_event
    ):
        listener = MessageListener(log_repository, logger=mock_logger, name="audit")

        [(_, _, name)] = [r for r in listener.registrations() if r[0] == EventType.MESSAGE_CREATED]
        await listener.on_message_created(created_event)

        assert name == "audit.on_message_created"
        log_repository.has_succeeded.assert_awaited_once_with(created_event.id, name)

    @pytest.mark.asyncio
    async def test_created_event_is_audited(self, listener, created_event, mock_logger):
        await listener.on_message_created(created_event)

        mock_logger.info.assert_called_once_with(
            "Message created",
            event_id=str(created_event.id),
            message_id="m1",
            owner="+18005550100",
            contact="+18005550199",
        )

    @pytest.mark.asyncio
    async def test_checks_delivery_log_with_own_name(
        self, listener, log_repository, created_event
    ):
        await listener.on_message_created(created_event)

        log_repository.has_succeeded.assert_awaited_once_with(
            created_event.id, "MessageListener.on_message_created"
        )

    @pytest.mark.asyncio
    async def test_skips_event_already_handled(
        self, listener, log_repository, created_event, mock_logger
    ):
        log_repository.has_succeeded.return_value = True

        await listener.on_message_created(created_event)

        audit_calls = [c for c in mock_logger.info.call_args_list if c.args == ("Message created",)]
        assert audit_calls == []

    @pytest.mark.asyncio
    async def test_status_event_is_audited(self, listener, mock_logger):
        event = Event.create(
            EventType.MESSAGE_FAILED,
            {
                "message_id": "m1",
                "owner": "+18005550100",
                "previous_status": "sent",
                "status": "failed",
                "reason": "carrier rejected",
            },
        )

        await listener.on_message_failed(event)

        kwargs = mock_logger.info.call_args.kwargs
        assert mock_logger.info.call_args.args == ("Message status changed",)
        assert kwargs["status"] == "failed"
        assert kwargs["reason"] == "carrier rejected"

    @pytest.mark.asyncio
    async def test_malformed_payload_raises(self, listener):
        event = Event.create(EventType.MESSAGE_SENT, {"status": "sent"})

        with pytest.raises(ValueError, match="message_id"):
            await listener.on_message_sent(event)
