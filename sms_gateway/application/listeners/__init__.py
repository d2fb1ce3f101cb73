from .message_listener import MessageListener

__all__ = ["MessageListener"]
