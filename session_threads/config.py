"""Session Threads Configuration."""
import os
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    value = (os.getenv(name) or "").strip()
    if not value:
        return default
    return Path(value).expanduser()


# Log locations
CODEX_HOME = _env_path("SESSION_THREADS_HOME", Path.home() / ".codex")
SESSIONS_DIR = _env_path("SESSION_THREADS_SESSIONS_DIR", CODEX_HOME / "sessions")
SESSION_LOG_SUFFIX = ".jsonl"

# Tag attached to every listed summary so hosts can tell log-derived sessions apart.
SESSION_SOURCE = "session"

# 0 means "no limit" for the HTTP and CLI surfaces.
DEFAULT_LIST_LIMIT = _env_int("SESSION_THREADS_DEFAULT_LIMIT", 0)

# Observability
OTEL_ENABLED = _env_bool("SESSION_THREADS_OTEL_ENABLED", False)
OTEL_ENDPOINT = os.getenv("SESSION_THREADS_OTEL_ENDPOINT", "http://localhost:4318")
OTEL_SERVICE_NAME = os.getenv("SESSION_THREADS_OTEL_SERVICE_NAME", "session-threads")
PROM_PORT = _env_int("SESSION_THREADS_PROM_PORT", 9464)

# CORS
FRONTEND_ORIGIN = os.getenv("SESSION_THREADS_FRONTEND_ORIGIN", "http://localhost:3000")
