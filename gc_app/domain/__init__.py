"""Domain layer: schemas, validators, exceptions. Pure business logic only."""

from gc_app.domain.exceptions import DomainError, DomainValidationError, FieldError
from gc_app.domain.validators import validate_input

__all__ = [
    "DomainError",
    "DomainValidationError",
    "FieldError",
    "validate_input",
]
