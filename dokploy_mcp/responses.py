"""
Uniform response envelope returned by every consolidated tool.

Success and failure share one shape family so an agent can branch on
``status`` alone:

    {"status": "success", "message": "...", "data": {...}}
    {"status": "error", "error": "Project lock violation", "detail": "..."}

Nothing else in the package builds envelopes by hand.
"""

from typing import Any


def success(message: str, data: Any = None) -> dict[str, Any]:
    return {"status": "success", "message": message, "data": data}


def error(title: str, detail: str) -> dict[str, Any]:
    return {"status": "error", "error": title, "detail": detail}


def is_error(response: dict[str, Any]) -> bool:
    return response.get("status") == "error"
