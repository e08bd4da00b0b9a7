"""Domain-specific exceptions. Pure domain layer, no infrastructure."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when input violates a schema. Carries one entry per offending field."""

    def __init__(self, message: str, errors: Optional[List[FieldError]] = None) -> None:
        self.errors = list(errors or [])
        super().__init__(message)
