"""Common input schemas for GC applications. Strict validation, no DB or infrastructure."""

import re
from typing import Annotated, Dict, Literal, Optional

from pydantic import AfterValidator, BaseModel, Field

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
POSTAL_CODE_PATTERN = re.compile(r"^[A-Za-z]\d[A-Za-z][ -]?\d[A-Za-z]\d$")
PHONE_PATTERN = re.compile(r"^(\+?1[-.\s]?)?(\(?\d{3}\)?[-.\s]?)?\d{3}[-.\s]?\d{4}$")
SIN_PATTERN = re.compile(r"^\d{3}[-\s]?\d{3}[-\s]?\d{3}$")


def _email(value: str) -> str:
    if len(value) > 254:
        raise ValueError("Email must be less than 254 characters")
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please enter a valid email address")
    return value


def _postal_code(value: str) -> str:
    if not POSTAL_CODE_PATTERN.match(value):
        raise ValueError("Please enter a valid Canadian postal code (e.g., K1A 0B1)")
    return re.sub(r"\s", " ", value.upper())


def _phone(value: str) -> str:
    if not PHONE_PATTERN.match(value):
        raise ValueError("Please enter a valid phone number")
    return value


def _sin(value: str) -> str:
    # Format only; actual verification requires CRA
    if not SIN_PATTERN.match(value):
        raise ValueError("Please enter a valid SIN format")
    return re.sub(r"[-\s]", "", value)


Email = Annotated[str, AfterValidator(_email)]
PostalCode = Annotated[str, AfterValidator(_postal_code)]
Phone = Annotated[str, AfterValidator(_phone)]
SIN = Annotated[str, AfterValidator(_sin)]


class LoginInput(BaseModel):
    email: Email


class ProfileInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: Email
    phone: Optional[Phone] = None


class ContactInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: Email
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=10, max_length=5000)


class PaginationInput(BaseModel):
    page: int = Field(1, gt=0)
    limit: int = Field(20, gt=0, le=100)
    sort_by: Optional[str] = None
    sort_order: Literal["asc", "desc"] = "asc"


class SearchInput(PaginationInput):
    query: str = Field(..., min_length=1, max_length=500)
    filters: Optional[Dict[str, str]] = None

