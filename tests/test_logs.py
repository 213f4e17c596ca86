"""Tests for the JSON log formatter (dokploy_mcp/logs.py)."""

import json
import logging

from dokploy_mcp.logs import JSONLogFormatter


def test_structured_fields_are_merged():
    record = logging.LogRecord(
        "dokploy-mcp.lock-enforcer", logging.WARNING, __file__, 1, "Project lock violation", None, None
    )
    record.log_data = {"locked_project_id": "proj-1", "decision": "denied"}

    entry = json.loads(JSONLogFormatter().format(record))

    assert entry["level"] == "WARNING"
    assert entry["logger"] == "dokploy-mcp.lock-enforcer"
    assert entry["message"] == "Project lock violation"
    assert entry["locked_project_id"] == "proj-1"
    assert entry["decision"] == "denied"


def test_plain_record_has_base_fields_only():
    record = logging.LogRecord("dokploy-mcp", logging.INFO, __file__, 1, "hello %s", ("world",), None)

    entry = json.loads(JSONLogFormatter().format(record))

    assert set(entry) == {"timestamp", "level", "logger", "message"}
    assert entry["message"] == "hello world"
