"""Role-based access control. Pure functions over a fixed table. No FastAPI."""

from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

from gc_app.security.session import Session


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"
    CITIZEN = "citizen"
    GUEST = "guest"


class Permission(str, Enum):
    READ_OWN = "read:own"
    READ_ALL = "read:all"
    WRITE_OWN = "write:own"
    WRITE_ALL = "write:all"
    DELETE_OWN = "delete:own"
    DELETE_ALL = "delete:all"
    ADMIN_USERS = "admin:users"
    ADMIN_AUDIT = "admin:audit"
    ADMIN_SYSTEM = "admin:system"


# Role      read:own read:all write:own write:all delete:own delete:all admin:*
# admin     ✓        ✓        ✓         ✓         ✓          ✓          users,audit,system
# manager   ✓        ✓        ✓         ✓         ✓          ✗          audit
# user      ✓        ✓        ✓         ✗         ✓          ✗          ✗
# citizen   ✓        ✗        ✓         ✗         ✗          ✗          ✗
# guest     ✓        ✗        ✗         ✗         ✗          ✗          ✗

ROLE_PERMISSIONS: dict[Role, FrozenSet[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.MANAGER: frozenset(
        {
            Permission.READ_OWN,
            Permission.READ_ALL,
            Permission.WRITE_OWN,
            Permission.WRITE_ALL,
            Permission.DELETE_OWN,
            Permission.ADMIN_AUDIT,
        }
    ),
    Role.USER: frozenset(
        {
            Permission.READ_OWN,
            Permission.READ_ALL,
            Permission.WRITE_OWN,
            Permission.DELETE_OWN,
        }
    ),
    Role.CITIZEN: frozenset({Permission.READ_OWN, Permission.WRITE_OWN}),
    Role.GUEST: frozenset({Permission.READ_OWN}),
}

def parse_roles(values: Optional[Iterable[str]]) -> List[Role]:
    """Keep only values naming a known role, in order, without duplicates."""
    roles: List[Role] = []
    for value in values or ():
        try:
            role = Role(value)
        except ValueError:
            continue
        if role not in roles:
            roles.append(role)
    return roles


def _session_roles(session: Optional[Session]) -> List[str]:
    if session is None or session.user is None:
        return []
    return list(session.user.roles or [])


def is_authenticated(session: Optional[Session]) -> bool:
    return session is not None and session.user is not None


def has_role(session: Optional[Session], role: Role) -> bool:
    return role in _session_roles(session)


def has_any_role(session: Optional[Session], roles: Iterable[Role]) -> bool:
    held = _session_roles(session)
    if not held:
        return False
    return any(role in held for role in roles)


def has_all_roles(session: Optional[Session], roles: Iterable[Role]) -> bool:
    held = _session_roles(session)
    if not held:
        return False
    return all(role in held for role in roles)


def has_permission(session: Optional[Session], permission: Permission) -> bool:
    try:
        wanted = Permission(permission)
    except ValueError:
        return False
    return wanted in get_permissions(session)


def get_permissions(session: Optional[Session]) -> set[Permission]:
    """Union of the permission sets of every role on the session."""
    permissions: set[Permission] = set()
    for role in parse_roles(_session_roles(session)):
        permissions |= ROLE_PERMISSIONS[role]
    return permissions


def is_admin(session: Optional[Session]) -> bool:
    return has_role(session, Role.ADMIN)
