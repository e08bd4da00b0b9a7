"""Security tests: RBAC role checks and the role -> permission matrix."""

import pytest

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
    parse_roles,
)
from gc_app.security.session import Session, SessionUser


def make_session(*roles):
    return Session(user=SessionUser(id="u-1", roles=list(roles)))


# Permission matrix:
# Role      read:own read:all write:own write:all delete:own delete:all admin:*
# admin     ✓        ✓        ✓         ✓         ✓          ✓          users,audit,system
# manager   ✓        ✓        ✓         ✓         ✓          ✗          audit
# user      ✓        ✓        ✓         ✗         ✓          ✗          ✗
# citizen   ✓        ✗        ✓         ✗         ✗          ✗          ✗
# guest     ✓        ✗        ✗         ✗         ✗          ✗          ✗


def test_admin_has_all_permissions():
    assert get_permissions(make_session("admin")) == set(Permission)


def test_manager_permissions():
    assert get_permissions(make_session("manager")) == {
        Permission.READ_OWN,
        Permission.READ_ALL,
        Permission.WRITE_OWN,
        Permission.WRITE_ALL,
        Permission.DELETE_OWN,
        Permission.ADMIN_AUDIT,
    }


def test_user_permissions():
    session = make_session("user")
    assert has_permission(session, Permission.READ_ALL)
    assert has_permission(session, Permission.DELETE_OWN)
    assert not has_permission(session, Permission.WRITE_ALL)
    assert not has_permission(session, Permission.ADMIN_USERS)


def test_citizen_and_guest_permissions():
    assert get_permissions(make_session("citizen")) == {Permission.READ_OWN, Permission.WRITE_OWN}
    assert get_permissions(make_session("guest")) == {Permission.READ_OWN}


def test_permissions_are_union_of_roles():
    perms = get_permissions(make_session("citizen", "manager"))
    assert Permission.ADMIN_AUDIT in perms
    assert Permission.WRITE_OWN in perms
    assert Permission.DELETE_ALL not in perms


def test_permission_accepts_string_value():
    assert has_permission(make_session("manager"), "admin:audit")
    assert not has_permission(make_session("manager"), "admin:nonsense")


def test_no_session_has_nothing():
    assert not is_authenticated(None)
    assert get_permissions(None) == set()
    assert not has_role(None, Role.ADMIN)
    assert not has_any_role(None, [Role.USER])
    assert not has_all_roles(None, [Role.USER])
    assert not has_permission(None, Permission.READ_OWN)


def test_session_without_roles_is_authenticated_but_unprivileged():
    session = make_session()
    assert is_authenticated(session)
    assert get_permissions(session) == set()
    assert not has_any_role(session, [Role.USER, Role.ADMIN])


def test_role_checks():
    session = make_session("user", "manager")
    assert has_role(session, Role.MANAGER)
    assert not is_admin(session)
    assert has_any_role(session, [Role.ADMIN, Role.USER])
    assert has_all_roles(session, [Role.USER, Role.MANAGER])
    assert not has_all_roles(session, [Role.USER, Role.ADMIN])
    assert is_admin(make_session("admin"))


def test_unknown_roles_grant_nothing():
    session = make_session("superuser", "root")
    assert get_permissions(session) == set()
    assert not is_admin(session)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, []),
        ([], []),
        (["admin", "bogus", "user", "admin"], [Role.ADMIN, Role.USER]),
        (["citizen"], [Role.CITIZEN]),
    ],
)
def test_parse_roles_filters_and_dedups(raw, expected):
    assert parse_roles(raw) == expected
