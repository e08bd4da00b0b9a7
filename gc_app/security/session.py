"""Authenticated session shape shared by the gate, RBAC and page dependencies."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SessionUser:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Session:
    """Decoded session cookie. Roles are fixed for the lifetime of the session."""

    user: SessionUser
    provider: Optional[str] = None
    expires: Optional[datetime] = None
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user": {
                "id": self.user.id,
                "name": self.user.name,
                "email": self.user.email,
                "roles": list(self.user.roles),
            },
            "provider": self.provider,
            "expires": self.expires.isoformat() if self.expires else None,
        }
