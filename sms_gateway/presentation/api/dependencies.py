from fastapi import Depends, Request

from ...application.services import MessageService
from ...application.validators import MessageValidator
from ...config import Settings
from ...container import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_settings(container: Container = Depends(get_container)) -> Settings:
    return container.settings


def get_message_service(container: Container = Depends(get_container)) -> MessageService:
    return container.message_service


def get_message_validator(container: Container = Depends(get_container)) -> MessageValidator:
    return container.message_validator


def original_url(request: Request) -> str:
    """Path and query string of the request, kept on messages as provenance."""
    url = request.url
    return f"{url.path}?{url.query}" if url.query else url.path
