"""Typed errors raised by domain objects and application services."""

ACTIVE_SESSION_EXISTS = "ACTIVE_SESSION_EXISTS"
SESSION_ALREADY_COMPLETED = "SESSION_ALREADY_COMPLETED"
SESSION_ALREADY_ABANDONED = "SESSION_ALREADY_ABANDONED"
SESSION_NOT_ACTIVE = "SESSION_NOT_ACTIVE"
SESSION_ACCESS_DENIED = "SESSION_ACCESS_DENIED"


class DomainError(Exception):
    """Base class for errors that carry a stable machine-readable code."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Raised when input is malformed, missing or out of range."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, rule: str, message: str) -> None:
        super().__init__(message, {"field": field, "rule": rule})
        self.field = field
        self.rule = rule


class NotFoundError(DomainError):
    """Raised when a referenced entity is missing or owned by someone else."""

    code = "RESOURCE_NOT_FOUND"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            f"{entity} not found: {entity_id}",
            {"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class BusinessRuleViolation(DomainError):
    """Raised when a well-formed request conflicts with a domain invariant."""

    def __init__(
        self, code: str, message: str, details: dict[str, object] | None = None
    ) -> None:
        super().__init__(message, details)
        self.code = code
