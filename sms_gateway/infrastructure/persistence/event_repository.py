from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...application.exceptions import PersistenceError
from ...application.ports.outbound import EventRepository
from ...domain.entities import Event
from .models import EventModel


class SqlAlchemyEventRepository(EventRepository):
    """SQLAlchemy implementation of the event store."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, event: Event) -> Event:
        try:
            async with self._session_factory() as session, session.begin():
                stored = await session.get(EventModel, event.id)
                if stored is not None:
                    return stored.to_entity()
                session.add(EventModel.from_entity(event))
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot save event {event.id} [{event.type.value}]") from e
        return event
