"""Core tests: request-scoped audit context isolation and merge semantics."""

import asyncio

import pytest

from gc_app.core.context import AuditContext, audit_scope, clear_context, get_context, set_context


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


def test_empty_by_default():
    assert get_context() == AuditContext()


def test_set_context_merges_last_write_wins():
    set_context(user_id="u-1", ip_address="10.0.0.1")
    set_context(user_id="u-2")
    ctx = get_context()
    assert ctx.user_id == "u-2"
    assert ctx.ip_address == "10.0.0.1"


def test_unknown_field_rejected():
    with pytest.raises(TypeError):
        set_context(tenant_id="t1")


def test_context_is_immutable():
    ctx = set_context(user_id="u-1")
    with pytest.raises(AttributeError):
        ctx.user_id = "other"  # type: ignore[misc]


def test_audit_scope_restores_previous_context():
    set_context(user_id="outer")
    with audit_scope(user_id="inner", request_id="r-1") as ctx:
        assert ctx.user_id == "inner"
        assert get_context().request_id == "r-1"
    assert get_context().user_id == "outer"
    assert get_context().request_id is None


async def test_concurrent_tasks_do_not_see_each_others_context():
    seen = {}

    async def handle(user_id: str, delay: float):
        with audit_scope(user_id=user_id, request_id=f"req-{user_id}"):
            await asyncio.sleep(delay)
            seen[user_id] = get_context()

    await asyncio.gather(handle("a", 0.02), handle("b", 0.0), handle("c", 0.01))

    for user_id, ctx in seen.items():
        assert ctx.user_id == user_id
        assert ctx.request_id == f"req-{user_id}"
    assert get_context() == AuditContext()
