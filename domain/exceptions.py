"""
Domain errors for workout tracking.

Every rule violation inside the tracking domain raises TrackingDomainError:
illegal state transitions, empty identifiers, values outside their allowed
range, and references to exercises or sets that are not part of the aggregate.
"""


class TrackingDomainError(ValueError):
    """Raised when a tracking operation violates a domain rule."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @classmethod
    def invalid_transition(cls, action: str, entity: str, status: str) -> "TrackingDomainError":
        return cls(f"Cannot {action} {entity} with status {status}")

    @classmethod
    def empty_identifier(cls, label: str) -> "TrackingDomainError":
        return cls(f"{label} cannot be empty")


class NotFoundError(TrackingDomainError):
    """Raised when an aggregate referenced by id does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
