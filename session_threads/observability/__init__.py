"""Observability helpers."""

from session_threads.observability.otel import (
    initialize,
    shutdown,
    start_span,
    record_scan,
    record_parser_failure,
)

__all__ = [
    "initialize",
    "shutdown",
    "start_span",
    "record_scan",
    "record_parser_failure",
]
