"""Schema validation that reports field-level errors instead of raising pydantic internals."""

from typing import Any, List, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gc_app.domain.exceptions import DomainValidationError, FieldError

T = TypeVar("T", bound=BaseModel)


def field_errors(exc: ValidationError) -> List[FieldError]:
    """One FieldError per pydantic error; nested locations are dotted (e.g. filters.region)."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append(FieldError(field=".".join(loc) or "__root__", message=message))
    return errors


def validate_input(schema: Type[T], data: Mapping[str, Any]) -> T:
    """Parse data against schema. Raises DomainValidationError listing every invalid field."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise DomainValidationError(
            f"{schema.__name__} validation failed", errors=field_errors(e)
        ) from e
