from . import health, messages

__all__ = ["health", "messages"]
