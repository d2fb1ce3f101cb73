from .event_listener_log_repository import EventListenerLogRepository
from .event_repository import EventRepository
from .message_repository import MessageRepository

__all__ = ["EventListenerLogRepository", "EventRepository", "MessageRepository"]
