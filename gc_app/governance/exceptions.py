"""Governance-layer exceptions. Typed, no HTTP."""


class GovernanceError(Exception):
    """Base for all governance-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuditPersistenceError(GovernanceError):
    """Raised by an audit sink when a write fails. The audit logger catches it; callers never see it."""
