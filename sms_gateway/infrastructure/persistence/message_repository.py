from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...application.exceptions import (
    ConcurrentUpdateError,
    MessageNotFoundError,
    PersistenceError,
)
from ...application.ports.outbound import MessageRepository
from ...domain.entities import Message, MessageStatus
from ...domain.value_objects import PhoneNumber
from .models import MessageModel


class SqlAlchemyMessageRepository(MessageRepository):
    """SQLAlchemy implementation of MessageRepository.

    Each call runs in its own session and transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, message: Message) -> Message:
        try:
            async with self._session_factory() as session, session.begin():
                session.add(MessageModel.from_entity(message))
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot save message {message.id}") from e
        return message

    async def get_by_id(self, message_id: UUID) -> Message | None:
        try:
            async with self._session_factory() as session:
                model = await session.get(MessageModel, message_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot load message {message_id}") from e
        return model.to_entity() if model else None

    async def update(
        self, message: Message, expected_status: MessageStatus | None = None
    ) -> Message:
        values = MessageModel.from_entity(message)
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message.id)
            .values(
                status=values.status,
                updated_at=values.updated_at,
                sent_at=values.sent_at,
                delivered_at=values.delivered_at,
                failed_at=values.failed_at,
                failure_reason=values.failure_reason,
            )
        )
        if expected_status is not None:
            stmt = stmt.where(MessageModel.status == expected_status.value)

        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    exists = await session.scalar(
                        select(MessageModel.id).where(MessageModel.id == message.id)
                    )
                    if exists is None:
                        raise MessageNotFoundError(message.id)
                    if expected_status is not None:
                        raise ConcurrentUpdateError(message.id, expected_status.value)
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot update message {message.id}") from e
        return message

    async def find_outstanding(self, owner: PhoneNumber | None, limit: int) -> list[Message]:
        stmt = select(MessageModel).where(MessageModel.status == MessageStatus.PENDING.value)
        if owner is not None:
            stmt = stmt.where(MessageModel.owner == str(owner))
        stmt = stmt.order_by(MessageModel.created_at.asc(), MessageModel.id.asc()).limit(limit)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                models = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("cannot fetch outstanding messages") from e
        return [model.to_entity() for model in models]
