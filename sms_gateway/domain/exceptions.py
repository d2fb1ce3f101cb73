class InvalidStatusTransitionError(ValueError):
    """Raised when an entity is asked to move to a status it cannot reach."""

    def __init__(self, entity: str, current: str, target: str) -> None:
        super().__init__(f"Cannot move {entity} from {current} to {target}")
        self.current = current
        self.target = target
