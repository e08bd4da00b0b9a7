"""Domain validators. Pure validation functions."""

from gc_app.domain.validators.input_validator import field_errors, validate_input

__all__ = ["field_errors", "validate_input"]
