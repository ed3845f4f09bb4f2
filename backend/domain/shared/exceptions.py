"""
Domain Exceptions.

Custom exceptions for domain-level errors.
These exceptions represent business rule violations.
"""

from typing import Optional, Any, Dict, Iterable


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "DOMAIN_ERROR"
        self.details = details or {}


class EntityNotFoundException(DomainException):
    """
    Raised when an entity is not found.

    For the recalculation engine this is a precondition failure: the caller
    handed over a stale id.
    """

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            message=f"{entity_type} with id '{entity_id}' not found",
            code="ENTITY_NOT_FOUND",
            details={"entity_type": entity_type, "entity_id": str(entity_id)}
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class ValidationException(DomainException):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field, "value": str(value) if value is not None else None}
        )


class ComputedFieldError(DomainException):
    """
    Raised when a client write tries to change an engine-owned field.

    Progress, priority and the aggregated durations are derived from
    subtasks; only the recalculation engine may write them.
    """

    def __init__(self, entity_type: str, entity_id: Any, fields: Iterable[str]):
        fields = sorted(fields)
        super().__init__(
            message=f"{entity_type} '{entity_id}': computed fields are read-only: {', '.join(fields)}",
            code="COMPUTED_FIELD_READ_ONLY",
            details={
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "fields": fields,
            }
        )
