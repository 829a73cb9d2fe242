"""
JSON-RPC 2.0 Transport Utilities — Python

Low-level JSON-RPC message helpers for the stdio tool server.
Used by mcp_base.py; typically not imported directly by tool implementations.
"""

from __future__ import annotations

from typing import Any


def success_response(request_id: str | int, result: Any) -> dict[str, Any]:
    """Create a JSON-RPC success response."""
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def error_response(
    request_id: str | int,
    code: int,
    message: str,
    data: Any = None,
) -> dict[str, Any]:
    """Create a JSON-RPC error response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


def is_notification(msg: dict[str, Any]) -> bool:
    """A message without an id is a notification and gets no response."""
    return isinstance(msg, dict) and "id" not in msg


def is_valid_request(msg: dict[str, Any]) -> bool:
    """Validate that a parsed dict is a valid JSON-RPC 2.0 request."""
    return (
        isinstance(msg, dict)
        and msg.get("jsonrpc") == "2.0"
        and isinstance(msg.get("method"), str)
        and ("id" in msg and isinstance(msg["id"], (str, int)))
    )
