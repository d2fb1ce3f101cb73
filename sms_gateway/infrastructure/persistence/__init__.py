from .database import Database
from .event_listener_log_repository import SqlAlchemyEventListenerLogRepository
from .event_repository import SqlAlchemyEventRepository
from .message_repository import SqlAlchemyMessageRepository

__all__ = [
    "Database",
    "SqlAlchemyEventListenerLogRepository",
    "SqlAlchemyEventRepository",
    "SqlAlchemyMessageRepository",
]
