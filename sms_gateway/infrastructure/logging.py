"""
Structured logging configuration.

- JSON output in deployed environments, console rendering when debugging
- Request correlation id attached to every record
- Timing helper for latency fields
- Phone number masking for log fields
"""

import logging
import sys
import time
from contextvars import ContextVar
from uuid import uuid4

import structlog

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def configure_logging(service_name: str, level: str = "INFO", debug: bool = False) -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        service_name: Name of the service for log context
        level: Minimum log level name
        debug: Render human readable lines instead of JSON
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    # SQL statements are only interesting when debugging
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)

    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_service_name(service_name),
            _add_correlation_id,
            _mask_phone_fields,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _add_service_name(service_name: str):
    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name
        return event_dict

    return processor


def _add_correlation_id(logger, method_name, event_dict):
    cid = correlation_id.get()
    if cid:
        event_dict.setdefault("correlation_id", cid)
    return event_dict


PHONE_FIELDS = ("owner", "contact")


def _mask_phone_fields(logger, method_name, event_dict):
    for key in PHONE_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = mask_phone_number(value)
    return event_dict


def get_correlation_id() -> str:
    """Get current correlation ID or generate new one."""
    cid = correlation_id.get()
    if not cid:
        cid = str(uuid4())
        correlation_id.set(cid)
    return cid


def set_correlation_id(cid: str) -> None:
    correlation_id.set(cid)


class Timer:
    """
    Context manager for timing operations.

    Usage:
        with Timer() as t:
            await session.execute(text("SELECT 1"))
        logger.info("Database reachable", duration_ms=t.duration_ms)
    """

    def __init__(self):
        self._start: float = 0
        self._end: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self._end = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds, rounded to 2 decimal places."""
        return round((self._end - self._start) * 1000, 2)


def mask_phone_number(value: str, visible_digits: int = 4) -> str:
    """
    Hide all but the last digits of a phone number.

    Args:
        value: The phone number
        visible_digits: Number of trailing digits to keep

    Returns:
        Masked value, e.g. "+*******0199"
    """
    if not value:
        return ""
    if len(value) <= visible_digits:
        return value
    prefix = "+" if value.startswith("+") else ""
    hidden = len(value) - len(prefix) - visible_digits
    return prefix + "*" * hidden + value[-visible_digits:]
