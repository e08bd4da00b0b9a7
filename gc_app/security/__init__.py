"""Security: RBAC, sessions, edge route policy. No FastAPI."""

from gc_app.security.rbac import (
    Permission,
    Role,
    get_permissions,
    has_all_roles,
    has_any_role,
    has_permission,
    has_role,
    is_admin,
    is_authenticated,
)
from gc_app.security.session import Session, SessionUser

__all__ = [
    "Permission",
    "Role",
    "Session",
    "SessionUser",
    "get_permissions",
    "has_all_roles",
    "has_any_role",
    "has_permission",
    "has_role",
    "is_admin",
    "is_authenticated",
]
