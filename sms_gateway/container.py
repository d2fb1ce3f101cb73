"""
Dependency container.

Built once at startup and handed to whoever needs a component; there is no
module-level state. Listeners are registered on the dispatcher in
register_listeners(), after every component exists.
"""

from typing import Any

import structlog

from .application.listeners import MessageListener
from .application.services import EventDispatcher, MessageService
from .application.validators import MessageValidator
from .config import Settings
from .infrastructure.persistence import (
    Database,
    SqlAlchemyEventListenerLogRepository,
    SqlAlchemyEventRepository,
    SqlAlchemyMessageRepository,
)


class Container:
    """Owns and wires the application's components."""

    def __init__(self, settings: Settings, logger: Any = None) -> None:
        self.settings = settings
        self.logger = logger or structlog.get_logger()

        self.database = Database(settings.database_url, echo=settings.database_echo)
        session_factory = self.database.session_factory

        self.message_repository = SqlAlchemyMessageRepository(session_factory)
        self.event_repository = SqlAlchemyEventRepository(session_factory)
        self.event_listener_log_repository = SqlAlchemyEventListenerLogRepository(session_factory)

        self.event_dispatcher = EventDispatcher(
            self.event_repository,
            self.event_listener_log_repository,
            logger=self.logger,
        )
        self.message_service = MessageService(
            self.message_repository,
            self.event_dispatcher,
            take_max=settings.outstanding_take_max,
            logger=self.logger,
        )
        self.message_validator = MessageValidator(take_max=settings.outstanding_take_max)
        self.listeners: list[MessageListener] = []

    def register_listeners(self) -> None:
        """Subscribe every listener's handlers to the dispatcher."""
        if self.listeners:
            return

        listener = MessageListener(self.event_listener_log_repository, logger=self.logger)
        for event_type, handler, name in listener.registrations():
            self.event_dispatcher.subscribe(event_type, handler, name=name)
        self.listeners.append(listener)

    async def start(self) -> None:
        if self.settings.create_tables_on_startup:
            await self.database.create_tables()
        self.register_listeners()

    async def close(self) -> None:
        await self.database.close()
