"""Workspace path canonicalization for cross-platform equality checks."""
from __future__ import annotations

_LONG_PATH_PREFIX = "\\\\?\\"


def normalize_workspace_path(path: str, separator: str = "\\") -> str:
    """Return a case-folded, separator-normalized form of a workspace path.

    Session logs are written with Windows conventions, so forward slashes are
    rewritten to backslashes and the ``\\\\?\\`` long-path prefix is dropped
    before lowercasing.
    """
    normalized = (path or "").strip().replace("/", separator)
    if normalized.startswith(_LONG_PATH_PREFIX):
        normalized = normalized[len(_LONG_PATH_PREFIX):]
    return normalized.lower()


def same_workspace(left: str, right: str) -> bool:
    return normalize_workspace_path(left) == normalize_workspace_path(right)
