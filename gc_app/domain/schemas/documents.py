"""Document API schemas. Bookkeeping columns (created_by, deleted_at, ...) are never client-writable."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gc_app.governance.audit_models import SecurityClassification


class DocumentCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=200)
    body: Optional[str] = Field(None, max_length=50_000)
    security_classification: SecurityClassification = SecurityClassification.UNCLASSIFIED


class DocumentUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    body: Optional[str] = Field(None, max_length=50_000)
    security_classification: Optional[SecurityClassification] = None

    @field_validator("title", "security_classification")
    @classmethod
    def not_null(cls, v):
        # Omit the field to leave it unchanged; the columns are NOT NULL
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    body: Optional[str] = None
    owner_id: Optional[str] = None
    security_classification: SecurityClassification
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
