import re
from dataclasses import dataclass

E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")


@dataclass(frozen=True)
class PhoneNumber:
    """Immutable value object for an E.164 phone number."""
    value: str

    def __post_init__(self) -> None:
        if not E164_PATTERN.match(self.value):
            raise ValueError(f"Phone number {self.value!r} is not in E.164 format")

    def __str__(self) -> str:
        return self.value
