import pytest

from sms_gateway.domain.entities import Message, MessageStatus
from sms_gateway.domain.exceptions import InvalidStatusTransitionError
from sms_gateway.domain.value_objects import MessageContent


class TestMessageCreation:
    def test_create_message_is_pending(self, owner, contact):
        message = Message.create(
            owner=owner,
            contact=contact,
            content=MessageContent(text="Hello"),
            request_url="/v1/messages/send",
        )

        assert message.id is not None
        assert message.owner == owner
        assert message.contact == contact
        assert message.status == MessageStatus.PENDING
        assert message.request_url == "/v1/messages/send"
        assert message.created_at == message.updated_at
        assert message.is_outstanding

    def test_create_generates_unique_ids(self, owner, contact):
        first = Message.create(owner, contact, MessageContent("a"), "/")
        second = Message.create(owner, contact, MessageContent("b"), "/")

        assert first.id != second.id


class TestMessageTransitions:
    def test_pending_to_sent(self, sample_message):
        sample_message.transition_to(MessageStatus.SENT)

        assert sample_message.status == MessageStatus.SENT
        assert sample_message.sent_at is not None
        assert not sample_message.is_outstanding

    def test_sent_to_delivered(self, sample_message):
        sample_message.transition_to(MessageStatus.SENT)
        sample_message.transition_to(MessageStatus.DELIVERED)

        assert sample_message.status == MessageStatus.DELIVERED
        assert sample_message.delivered_at is not None

    def test_failed_records_reason(self, sample_message):
        sample_message.transition_to(MessageStatus.FAILED, reason="no signal")

        assert sample_message.status == MessageStatus.FAILED
        assert sample_message.failed_at is not None
        assert sample_message.failure_reason == "no signal"

    def test_transition_updates_timestamp(self, sample_message):
        original_updated = sample_message.updated_at

        sample_message.transition_to(MessageStatus.SENT)

        assert sample_message.updated_at >= original_updated

    @pytest.mark.parametrize(
        "path",
        [
            [MessageStatus.DELIVERED],
            [MessageStatus.PENDING],
            [MessageStatus.SENT, MessageStatus.PENDING],
            [MessageStatus.FAILED, MessageStatus.SENT],
            [MessageStatus.SENT, MessageStatus.DELIVERED, MessageStatus.FAILED],
        ],
    )
    def test_invalid_transition_raises_error(self, sample_message, path):
        *steps, last = path
        for step in steps:
            sample_message.transition_to(step)

        with pytest.raises(InvalidStatusTransitionError, match="Cannot move message"):
            sample_message.transition_to(last)

    def test_rejected_transition_leaves_message_unchanged(self, sample_message):
        with pytest.raises(InvalidStatusTransitionError):
            sample_message.transition_to(MessageStatus.DELIVERED)

        assert sample_message.status == MessageStatus.PENDING
        assert sample_message.delivered_at is None
