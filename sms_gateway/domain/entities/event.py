from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any, Mapping
from uuid import UUID, uuid4

from ..value_objects import EventType


@dataclass(frozen=True)
class Event:
    """Immutable record of something that happened in the domain."""

    type: EventType
    payload: Mapping[str, Any]
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        # Freeze the payload so handlers cannot mutate it between each other
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    @classmethod
    def create(cls, event_type: EventType, payload: Mapping[str, Any]) -> "Event":
        return cls(type=event_type, payload=payload)

    def payload_dict(self) -> dict[str, Any]:
        return dict(self.payload)
