import asyncio
from unittest.mock import AsyncMock

import pytest

from sms_gateway.application.exceptions import PersistenceError
from sms_gateway.application.services import EventDispatcher, listener_name
from sms_gateway.domain.entities import Event, EventListenerLogStatus
from sms_gateway.domain.value_objects import EventType


def _echo(value, *args, **kwargs):
    return value


class TestEventDispatcher:
    @pytest.fixture
    def event_repository(self):
        return AsyncMock(create=AsyncMock(side_effect=_echo))

    @pytest.fixture
    def log_repository(self):
        repository = AsyncMock()
        repository.create.side_effect = _echo
        return repository

    @pytest.fixture
    def dispatcher(self, event_repository, log_repository, mock_logger):
        return EventDispatcher(event_repository, log_repository, logger=mock_logger)

    @pytest.fixture
    def event(self):
        return Event.create(EventType.MESSAGE_CREATED, {"message_id": "m1"})

    @pytest.mark.asyncio
    async def test_publish_stores_event_before_handlers(self, dispatcher, event_repository, event):
        calls = []
        event_repository.create.side_effect = lambda e: calls.append("store") or e

        async def handler(e):
            calls.append("handler")

        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)
        result = await dispatcher.publish(event)

        assert result is event
        assert calls == ["store", "handler"]
        event_repository.create.assert_called_once_with(event)

    @pytest.mark.asyncio
    async def test_publish_without_subscribers_only_stores_event(
        self, dispatcher, event_repository, log_repository, event
    ):
        await dispatcher.publish(event)

        event_repository.create.assert_called_once()
        log_repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_handlers_run_in_registration_order(self, dispatcher, event):
        order = []

        async def first(e):
            order.append("first")

        async def second(e):
            order.append("second")

        async def third(e):
            order.append("third")

        for handler in (first, second, third):
            dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)

        await dispatcher.publish(event)

        assert order == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_only_matching_event_type_is_dispatched(self, dispatcher, event):
        sent_handler = AsyncMock()
        dispatcher.subscribe(EventType.MESSAGE_SENT, sent_handler)

        await dispatcher.publish(event)

        sent_handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_one_log_row_per_handler(self, dispatcher, log_repository, event):
        async def ok(e):
            pass

        async def broken(e):
            raise RuntimeError("smtp down")

        async def also_ok(e):
            pass

        for handler in (ok, broken, also_ok):
            dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)

        await dispatcher.publish(event)

        created = [c.args[0] for c in log_repository.create.call_args_list]
        updated = [c.args[0] for c in log_repository.update.call_args_list]
        assert len(created) == 3
        assert [log.listener_name for log in created] == [
            listener_name(ok),
            listener_name(broken),
            listener_name(also_ok),
        ]
        assert [log.status for log in updated] == [
            EventListenerLogStatus.SUCCESS,
            EventListenerLogStatus.FAILED,
            EventListenerLogStatus.SUCCESS,
        ]
        assert updated[1].error == "RuntimeError: smtp down"
        assert all(log.event_id == event.id for log in created)

    @pytest.mark.asyncio
    async def test_log_row_is_pending_while_handler_runs(self, dispatcher, log_repository, event):
        seen = []

        async def handler(e):
            seen.append(log_repository.create.call_args.args[0].status)

        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)
        await dispatcher.publish(event)

        assert seen == [EventListenerLogStatus.PENDING]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_later_handlers(self, dispatcher, event):
        later = AsyncMock()

        async def failing(e):
            raise ValueError("bad payload")

        dispatcher.subscribe(EventType.MESSAGE_CREATED, failing)
        dispatcher.subscribe(EventType.MESSAGE_CREATED, later)

        result = await dispatcher.publish(event)

        assert result is event
        later.assert_awaited_once_with(event)

    @pytest.mark.asyncio
    async def test_event_store_failure_propagates(
        self, dispatcher, event_repository, log_repository, event
    ):
        event_repository.create.side_effect = PersistenceError("db down")
        handler = AsyncMock()
        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)

        with pytest.raises(PersistenceError):
            await dispatcher.publish(event)

        handler.assert_not_called()
        log_repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_handler_skipped_when_pending_log_cannot_be_written(
        self, dispatcher, log_repository, event
    ):
        attempts = iter([PersistenceError("db down")])

        async def create(log):
            error = next(attempts, None)
            if error:
                raise error
            return log

        log_repository.create.side_effect = create
        skipped = AsyncMock()
        invoked = AsyncMock()
        dispatcher.subscribe(EventType.MESSAGE_CREATED, skipped)
        dispatcher.subscribe(EventType.MESSAGE_CREATED, invoked)

        await dispatcher.publish(event)

        skipped.assert_not_called()
        invoked.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_outcome_update_failure_is_not_raised(self, dispatcher, log_repository, event):
        log_repository.update.side_effect = PersistenceError("db down")
        handler = AsyncMock()
        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)

        await dispatcher.publish(event)

        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancellation_leaves_running_handler_pending(
        self, dispatcher, log_repository, event
    ):
        async def done(e):
            pass

        async def cancelled(e):
            raise asyncio.CancelledError()

        never = AsyncMock()
        dispatcher.subscribe(EventType.MESSAGE_CREATED, done)
        dispatcher.subscribe(EventType.MESSAGE_CREATED, cancelled)
        dispatcher.subscribe(EventType.MESSAGE_CREATED, never)

        with pytest.raises(asyncio.CancelledError):
            await dispatcher.publish(event)

        created = [c.args[0] for c in log_repository.create.call_args_list]
        assert [log.status for log in created] == [
            EventListenerLogStatus.SUCCESS,
            EventListenerLogStatus.PENDING,
        ]
        log_repository.update.assert_called_once()
        never.assert_not_called()


class TestSubscribe:
    @pytest.fixture
    def dispatcher(self, mock_logger):
        return EventDispatcher(AsyncMock(), AsyncMock(), logger=mock_logger)

    def test_subscribe_same_handler_twice_is_noop(self, dispatcher):
        async def handler(e):
            pass

        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)
        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)

        assert len(dispatcher.subscriptions(EventType.MESSAGE_CREATED)) == 1

    def test_same_handler_on_two_event_types(self, dispatcher):
        async def handler(e):
            pass

        dispatcher.subscribe(EventType.MESSAGE_SENT, handler)
        dispatcher.subscribe(EventType.MESSAGE_FAILED, handler)

        assert len(dispatcher.subscriptions(EventType.MESSAGE_SENT)) == 1
        assert len(dispatcher.subscriptions(EventType.MESSAGE_FAILED)) == 1

    def test_explicit_name_overrides_qualname(self, dispatcher):
        async def handler(e):
            pass

        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler, name="audit")

        assert dispatcher.subscriptions(EventType.MESSAGE_CREATED)[0].name == "audit"

    def test_default_name_is_qualified_name(self, dispatcher):
        async def handler(e):
            pass

        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)

        name = dispatcher.subscriptions(EventType.MESSAGE_CREATED)[0].name
        assert name.endswith("handler")

    def test_subscriptions_returns_a_copy(self, dispatcher):
        async def handler(e):
            pass

        dispatcher.subscribe(EventType.MESSAGE_CREATED, handler)
        dispatcher.subscriptions(EventType.MESSAGE_CREATED).clear()

        assert len(dispatcher.subscriptions(EventType.MESSAGE_CREATED)) == 1
