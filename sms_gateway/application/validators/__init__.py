from .message_validator import REPORTABLE_STATUSES, MessageValidator

__all__ = ["MessageValidator", "REPORTABLE_STATUSES"]
