from uuid import UUID

from fastapi import APIRouter, Depends, Request

from ....application.dtos import (
    MessageResponseDTO,
    OutstandingMessagesDTO,
    ResponseEnvelope,
    SendMessageDTO,
    UpdateMessageStatusDTO,
)
from ....application.exceptions import ValidationFailedError
from ....application.services import MessageService
from ....application.validators import MessageValidator
from ....config import Settings
from ..dependencies import get_message_service, get_message_validator, get_settings, original_url

router = APIRouter(prefix="/messages", tags=["messages"])


def _pluralize(word: str, count: int) -> str:
    return word if count == 1 else f"{word}s"


@router.post(
    "/send",
    response_model=ResponseEnvelope[MessageResponseDTO],
    summary="Send a new SMS message",
    description="Add a new SMS message to be sent by the android phone.",
)
async def send_message(
    payload: SendMessageDTO,
    request: Request,
    service: MessageService = Depends(get_message_service),
    validator: MessageValidator = Depends(get_message_validator),
) -> ResponseEnvelope[MessageResponseDTO]:
    if errors := validator.validate_send(payload):
        raise ValidationFailedError(errors)

    message = await service.send_message(payload.to_params(original_url(request)))
    return ResponseEnvelope(
        message="message added to queue",
        data=MessageResponseDTO.from_entity(message),
    )


@router.get(
    "/outstanding",
    response_model=ResponseEnvelope[list[MessageResponseDTO]],
    summary="Get messages which are to be sent",
    description="Get the oldest messages which the phone still has to send.",
)
async def get_outstanding(
    request: Request,
    query: OutstandingMessagesDTO = Depends(),
    service: MessageService = Depends(get_message_service),
    validator: MessageValidator = Depends(get_message_validator),
    settings: Settings = Depends(get_settings),
) -> ResponseEnvelope[list[MessageResponseDTO]]:
    if errors := validator.validate_outstanding(query):
        raise ValidationFailedError(errors)

    messages = await service.get_outstanding(
        query.to_params(original_url(request), default_take=settings.outstanding_take_default)
    )
    return ResponseEnvelope(
        message=f"fetch {len(messages)} {_pluralize('message', len(messages))}",
        data=[MessageResponseDTO.from_entity(m) for m in messages],
    )


@router.get(
    "/{message_id}",
    response_model=ResponseEnvelope[MessageResponseDTO],
    summary="Get message details",
)
async def get_message(
    message_id: UUID,
    service: MessageService = Depends(get_message_service),
) -> ResponseEnvelope[MessageResponseDTO]:
    message = await service.get_message(message_id)
    return ResponseEnvelope(message="message fetched", data=MessageResponseDTO.from_entity(message))


@router.put(
    "/{message_id}/status",
    response_model=ResponseEnvelope[MessageResponseDTO],
    summary="Report a message status",
    description="Called by the phone once a message was sent, delivered or failed.",
)
async def update_status(
    message_id: UUID,
    payload: UpdateMessageStatusDTO,
    service: MessageService = Depends(get_message_service),
    validator: MessageValidator = Depends(get_message_validator),
) -> ResponseEnvelope[MessageResponseDTO]:
    if errors := validator.validate_status(payload):
        raise ValidationFailedError(errors)

    message = await service.update_status(payload.to_params(message_id))
    return ResponseEnvelope(
        message=f"message marked as {message.status.value}",
        data=MessageResponseDTO.from_entity(message),
    )
