"""Immutable audit entry model. Domain-level immutability."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class AuditAction(str, Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    ACCESS_DENIED = "ACCESS_DENIED"
    EXPORT = "EXPORT"
    IMPORT = "IMPORT"


class SecurityClassification(str, Enum):
    UNCLASSIFIED = "UNCLASSIFIED"
    PROTECTED_A = "PROTECTED_A"
    PROTECTED_B = "PROTECTED_B"


@dataclass(frozen=True)
class AuditLoggerOptions:
    """Per-call options. PII stays redacted unless include_pii is set."""

    include_pii: bool = False
    security_classification: Optional[SecurityClassification] = None
    metadata: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class AuditEntry:
    """
    Append-only audit record: what happened to which entity, who did it, from where, when (UTC).
    ip_address is already anonymized and old/new values already redacted when an entry is built.
    """

    action: AuditAction
    entity_type: str
    entity_id: str
    timestamp: datetime
    user_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    session_id: Optional[str] = None
    request_id: Optional[str] = None
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    security_classification: SecurityClassification = SecurityClassification.UNCLASSIFIED

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging."""
        return {
            "action": self.action.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "user_agent": self.user_agent,
            "ip_address": self.ip_address,
            "session_id": self.session_id,
            "request_id": self.request_id,
            "old_values": self.old_values,
            "new_values": self.new_values,
            "metadata": self.metadata,
            "security_classification": self.security_classification.value,
            "timestamp": self.timestamp.isoformat(),
        }
