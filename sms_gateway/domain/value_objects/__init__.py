from .content import MAX_CONTENT_LENGTH, MessageContent
from .event_type import EventType
from .phone_number import E164_PATTERN, PhoneNumber

__all__ = ["E164_PATTERN", "EventType", "MAX_CONTENT_LENGTH", "MessageContent", "PhoneNumber"]
