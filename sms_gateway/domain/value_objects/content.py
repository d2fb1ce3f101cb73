from dataclasses import dataclass

MAX_CONTENT_LENGTH = 1024


@dataclass(frozen=True)
class MessageContent:
    """Immutable value object for SMS content."""
    text: str

    def __post_init__(self) -> None:
        if not self.text or len(self.text.strip()) == 0:
            raise ValueError("Message text cannot be empty")
        if len(self.text) > MAX_CONTENT_LENGTH:
            raise ValueError(f"Message text cannot exceed {MAX_CONTENT_LENGTH} characters")
