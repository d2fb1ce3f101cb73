from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation problem."""

    field: str
    message: str


class ValidationFailedError(Exception):
    """Raised when a request breaks a business rule."""

    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = errors


class PersistenceError(Exception):
    """Raised when a repository read or write fails."""

    pass


class MessageNotFoundError(Exception):
    """Raised when a message does not exist."""

    def __init__(self, message_id: UUID) -> None:
        super().__init__(f"Message {message_id} not found")
        self.message_id = message_id


class ConcurrentUpdateError(Exception):
    """Raised when a message changed status underneath an update."""

    def __init__(self, message_id: UUID, expected_status: str) -> None:
        super().__init__(f"Message {message_id} is no longer {expected_status}")
        self.message_id = message_id
        self.expected_status = expected_status
