from enum import Enum


class EventType(str, Enum):
    """Domain events emitted over a message's lifecycle."""
    MESSAGE_CREATED = "message.created"
    MESSAGE_SENT = "message.sent"
    MESSAGE_DELIVERED = "message.delivered"
    MESSAGE_FAILED = "message.failed"
