from .event import Event
from .event_listener_log import EventListenerLog, EventListenerLogStatus
from .message import Message, MessageStatus

__all__ = [
    "Event",
    "EventListenerLog",
    "EventListenerLogStatus",
    "Message",
    "MessageStatus",
]
