# gc_app/infrastructure/database/models.py

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String, Text

from gc_app.infrastructure.database.operations import ModelCapabilities
from gc_app.infrastructure.database.session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """Records with attribution and soft delete."""

    __abstract__ = True
    __capabilities__ = ModelCapabilities(soft_delete=True, created_by=True, updated_by=True)

    id = Column(String(36), primary_key=True, default=_uuid)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)

    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(254), nullable=True, unique=True)
    name = Column(String(100), nullable=True)
    provider = Column(String, nullable=True)
    roles = Column(JSON, nullable=True)


class Document(BaseModel):
    """Generic domain record owned by a user."""

    __tablename__ = "documents"

    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=True)
    owner_id = Column(String(36), nullable=True, index=True)
    security_classification = Column(String, nullable=False, default="UNCLASSIFIED")


class VerificationToken(Base):
    """Short-lived tokens: hard delete, no attribution, never audited."""

    __tablename__ = "verification_tokens"
    __capabilities__ = ModelCapabilities()

    id = Column(String(36), primary_key=True, default=_uuid)
    identifier = Column(String, nullable=False, index=True)
    token = Column(String, nullable=False, unique=True)
    expires = Column(DateTime(timezone=True), nullable=False)


class AuditLog(Base):
    """Append-only audit trail. Never updated or deleted by the application."""

    __tablename__ = "audit_logs"
    __capabilities__ = ModelCapabilities()

    id = Column(String(36), primary_key=True, default=_uuid)
    action = Column(String, nullable=False, index=True)
    entity_type = Column(String, nullable=False, index=True)
    entity_id = Column(String, nullable=False)
    user_id = Column(String, nullable=True, index=True)
    user_agent = Column(String, nullable=True)
    ip_address = Column(String, nullable=True)
    session_id = Column(String, nullable=True)
    request_id = Column(String, nullable=True)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    metadata_ = Column("metadata", JSON, nullable=True)
    security_classification = Column(String, nullable=False, default="UNCLASSIFIED")
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)


MODELS = {
    "User": User,
    "Document": Document,
    "VerificationToken": VerificationToken,
    "AuditLog": AuditLog,
}

MODEL_CAPABILITIES: dict[str, ModelCapabilities] = {
    name: model.__capabilities__ for name, model in MODELS.items()
}
