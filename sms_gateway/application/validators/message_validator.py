from ...domain.entities import MessageStatus
from ...domain.value_objects import E164_PATTERN, MAX_CONTENT_LENGTH
from ..dtos import OutstandingMessagesDTO, SendMessageDTO, UpdateMessageStatusDTO
from ..exceptions import FieldError

# Statuses the phone may report; pending is only ever set on creation
REPORTABLE_STATUSES = (MessageStatus.SENT, MessageStatus.DELIVERED, MessageStatus.FAILED)


class MessageValidator:
    """Business-rule checks for message requests. Pure: no I/O, no side effects."""

    def __init__(self, take_max: int = 10) -> None:
        self._take_max = take_max

    def validate_send(self, dto: SendMessageDTO) -> list[FieldError]:
        errors = []
        errors.extend(self._phone_number("from", dto.owner))
        errors.extend(self._phone_number("to", dto.contact))
        if not errors and dto.owner == dto.contact:
            errors.append(FieldError("to", "must be different from the sender"))

        content = dto.content.strip()
        if not content:
            errors.append(FieldError("content", "must not be empty"))
        elif len(dto.content) > MAX_CONTENT_LENGTH:
            errors.append(
                FieldError("content", f"must be at most {MAX_CONTENT_LENGTH} characters")
            )
        return errors

    def validate_outstanding(self, dto: OutstandingMessagesDTO) -> list[FieldError]:
        errors = []
        if dto.take is not None and not 1 <= dto.take <= self._take_max:
            errors.append(FieldError("take", f"must be between 1 and {self._take_max}"))
        if dto.owner is not None:
            errors.extend(self._phone_number("owner", dto.owner))
        return errors

    def validate_status(self, dto: UpdateMessageStatusDTO) -> list[FieldError]:
        allowed = [s.value for s in REPORTABLE_STATUSES]
        if dto.status not in allowed:
            return [FieldError("status", f"must be one of {', '.join(allowed)}")]
        if dto.status != MessageStatus.FAILED.value and dto.reason:
            return [FieldError("reason", "is only accepted for failed messages")]
        return []

    @staticmethod
    def _phone_number(field: str, value: str) -> list[FieldError]:
        if not E164_PATTERN.match(value):
            return [FieldError(field, "must be a phone number in E.164 format, e.g. +18005550199")]
        return []
