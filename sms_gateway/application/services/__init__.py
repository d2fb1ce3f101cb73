from .event_dispatcher import EventDispatcher, EventHandler, Subscription, listener_name
from .message_service import MessageService

__all__ = [
    "EventDispatcher",
    "EventHandler",
    "MessageService",
    "Subscription",
    "listener_name",
]
