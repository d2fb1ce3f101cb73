from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...application.exceptions import PersistenceError
from ...application.ports.outbound import EventListenerLogRepository
from ...domain.entities import EventListenerLog, EventListenerLogStatus
from .models import EventListenerLogModel


class SqlAlchemyEventListenerLogRepository(EventListenerLogRepository):
    """SQLAlchemy implementation of the event delivery log."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, log: EventListenerLog) -> EventListenerLog:
        try:
            async with self._session_factory() as session, session.begin():
                session.add(EventListenerLogModel.from_entity(log))
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"cannot save listener log for event {log.event_id} [{log.listener_name}]"
            ) from e
        return log

    async def update(self, log: EventListenerLog) -> None:
        values = EventListenerLogModel.from_entity(log)
        stmt = (
            update(EventListenerLogModel)
            .where(EventListenerLogModel.id == log.id)
            .values(
                status=values.status,
                error=values.error,
                updated_at=values.updated_at,
            )
        )
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot update listener log {log.id}") from e

    async def has_succeeded(self, event_id: UUID, listener_name: str) -> bool:
        stmt = (
            select(EventListenerLogModel.id)
            .where(
                EventListenerLogModel.event_id == event_id,
                EventListenerLogModel.listener_name == listener_name,
                EventListenerLogModel.status == EventListenerLogStatus.SUCCESS.value,
            )
            .limit(1)
        )
        try:
            async with self._session_factory() as session:
                found = await session.scalar(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot query listener logs for event {event_id}") from e
        return found is not None

    async def list_for_event(self, event_id: UUID) -> list[EventListenerLog]:
        stmt = (
            select(EventListenerLogModel)
            .where(EventListenerLogModel.event_id == event_id)
            .order_by(EventListenerLogModel.created_at.asc())
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                models = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot query listener logs for event {event_id}") from e
        return [model.to_entity() for model in models]
