from __future__ import annotations

import json
import logging

from freightmatch.core.logging import LogContext, build_log_event
from freightmatch.core.logging_config import JsonFormatter
from freightmatch.tasks.hooks import after_task, before_task


def test_json_formatter_includes_context_fields():
    record = logging.LogRecord("freightmatch.test", logging.INFO, __file__, 1, "assignment.committed", None, None)
    record.event = "assignment.committed"
    record.request_id = "req-1"
    record.reference_id = "CMD-2026-00001"

    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["message"] == "assignment.committed"
    assert payload["request_id"] == "req-1"
    assert payload["reference_id"] == "CMD-2026-00001"
    assert "transporter_id" not in payload


def test_build_log_event_merges_fields():
    event = build_log_event("task.start", LogContext(request_id="req-1", task_id="t-1"), attempt=2)
    assert event["event"] == "task.start"
    assert event["request_id"] == "req-1"
    assert event["attempt"] == 2


def test_task_hooks_default_task_id_to_key():
    start = before_task("events.dispatch_request_event", {"request_id": "req-1"})
    finish = after_task("events.dispatch_request_event", {"request_id": "req-1"}, status="succeeded")
    assert start["task_id"] == "events.dispatch_request_event"
    assert finish["status"] == "succeeded"
    assert "finished_at" in finish
