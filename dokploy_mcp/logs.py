"""
Structured JSON logging.

Every log line is one JSON object so log collectors can index fields like
the tool name, the action, or the lock decision. Structured fields are
attached with ``logger.info("msg", extra={"log_data": {...}})``.

Under the stdio transport, stdout carries the MCP protocol itself, so logs
must go to stderr there.
"""

import json
import logging
import sys


class JSONLogFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Example output:

        {"timestamp": "2026-02-06 10:30:00,123", "level": "WARNING",
         "logger": "dokploy-mcp.project-lock", "message": "Project lock violation",
         "locked_project_id": "proj-1", "project_id": "proj-2"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "log_data"):
            log_entry.update(record.log_data)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def configure_logging(level: str, transport: str) -> None:
    """Install the JSON formatter on the root logger."""
    stream = sys.stderr if transport == "stdio" else sys.stdout
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONLogFormatter())

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )
