"""
Shared Validation Utilities — Python

Path sandboxing and path validators used by the Python tool servers.
"""

from __future__ import annotations

import os
from pathlib import Path

from mcp_base import ErrorCodes, MCPError

# ─── Sandbox Validation ──────────────────────────────────────────────────────

_allowed_paths: list[Path] = []


def init_sandbox(paths: list[str]) -> None:
    """Initialize sandbox with user-granted directories."""
    global _allowed_paths
    _allowed_paths = [Path(p).resolve() for p in paths if p]


def assert_sandboxed(target_path: str) -> None:
    """
    Assert that a path is within the sandboxed directories.
    Raises MCPError with SANDBOX_VIOLATION code if not.
    """
    resolved = Path(target_path).resolve()

    is_allowed = any(
        resolved == allowed or str(resolved).startswith(str(allowed) + os.sep)
        for allowed in _allowed_paths
    )

    if not is_allowed:
        allowed_str = ", ".join(str(p) for p in _allowed_paths)
        raise MCPError(
            ErrorCodes.SANDBOX_VIOLATION,
            f'Path "{resolved}" is outside the sandboxed directories. Allowed: {allowed_str}',
        )


# ─── Path Checks ─────────────────────────────────────────────────────────────


def is_absolute_path(p: str) -> bool:
    """Check if a path is absolute."""
    return os.path.isabs(p)


def assert_absolute_path(p: str, param_name: str) -> None:
    """Assert a path is absolute, raise ValueError if not."""
    if not is_absolute_path(p):
        raise ValueError(f'Parameter "{param_name}" must be an absolute path. Got: "{p}"')


def assert_file_exists(p: str) -> None:
    """Raise FILE_NOT_FOUND unless the path names an existing file."""
    if not os.path.isfile(p):
        raise MCPError(ErrorCodes.FILE_NOT_FOUND, f"File not found: {p}")
