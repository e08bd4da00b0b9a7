"""Domain schemas. Request/response and validation."""

from gc_app.domain.schemas.documents import (
    DocumentCreateRequest,
    DocumentResponse,
    DocumentUpdateRequest,
)
from gc_app.domain.schemas.inputs import (
    ContactInput,
    LoginInput,
    PaginationInput,
    ProfileInput,
    SearchInput,
)

__all__ = [
    "ContactInput",
    "DocumentCreateRequest",
    "DocumentResponse",
    "DocumentUpdateRequest",
    "LoginInput",
    "PaginationInput",
    "ProfileInput",
    "SearchInput",
]
