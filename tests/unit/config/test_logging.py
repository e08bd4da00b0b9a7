"""Logging tests: JSON lines carry request and user ids."""

import json
import logging

from gc_app.config.logging import JsonFormatter
from gc_app.core.context import audit_scope


def make_record(**extra):
    record = logging.LogRecord("gc_app.test", logging.ERROR, __file__, 1, "boom %s", ("x",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_ids_taken_from_audit_context():
    with audit_scope(request_id="req-1", user_id="u-1"):
        line = json.loads(JsonFormatter().format(make_record()))
    assert line["message"] == "boom x"
    assert line["request_id"] == "req-1"
    assert line["user_id"] == "u-1"


def test_explicit_ids_used_outside_audit_context():
    line = json.loads(JsonFormatter().format(make_record(request_id="req-2", user_id="u-2")))
    assert line["request_id"] == "req-2"
    assert line["user_id"] == "u-2"
