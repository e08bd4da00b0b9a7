"""Governance: audit entries, sinks and the audit logger. No FastAPI."""

from gc_app.governance.audit_logger import (
    AuditLogger,
    anonymize_ip,
    create_audit_logger,
    sanitize_values,
)
from gc_app.governance.audit_models import (
    AuditAction,
    AuditEntry,
    AuditLoggerOptions,
    SecurityClassification,
)
from gc_app.governance.audit_sink import AuditSink, ConsoleAuditSink

__all__ = [
    "AuditAction",
    "AuditEntry",
    "AuditLogger",
    "AuditLoggerOptions",
    "AuditSink",
    "ConsoleAuditSink",
    "SecurityClassification",
    "anonymize_ip",
    "create_audit_logger",
    "sanitize_values",
]
