from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from sms_gateway.domain.entities import Message
from sms_gateway.domain.value_objects import MessageContent, PhoneNumber
from sms_gateway.infrastructure.persistence import (
    Database,
    SqlAlchemyEventListenerLogRepository,
    SqlAlchemyEventRepository,
    SqlAlchemyMessageRepository,
)

OWNER = "+18005550100"
CONTACT = "+18005550199"
OTHER_OWNER = "+447700900123"


@pytest.fixture
def owner() -> PhoneNumber:
    return PhoneNumber(OWNER)


@pytest.fixture
def contact() -> PhoneNumber:
    return PhoneNumber(CONTACT)


@pytest.fixture
def sample_message(owner, contact) -> Message:
    return Message.create(
        owner=owner,
        contact=contact,
        content=MessageContent(text="Your code is 1234"),
        request_url="/v1/messages/send",
    )


@pytest.fixture
def mock_logger():
    """Logger double whose bind() returns itself so calls can be asserted."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def message_repository(database) -> SqlAlchemyMessageRepository:
    return SqlAlchemyMessageRepository(database.session_factory)


@pytest.fixture
def event_repository(database) -> SqlAlchemyEventRepository:
    return SqlAlchemyEventRepository(database.session_factory)


@pytest.fixture
def log_repository(database) -> SqlAlchemyEventListenerLogRepository:
    return SqlAlchemyEventListenerLogRepository(database.session_factory)
