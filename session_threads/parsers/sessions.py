"""Build session listings and thread reconstructions from JSONL session logs."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from session_threads.date_utils import parse_timestamp_ms
from session_threads.models import (
    AgentMessageItem,
    ReasoningItem,
    SessionSummary,
    SessionThread,
    TextContentPart,
    ThreadItem,
    ThreadTurn,
    UserMessageItem,
)
from session_threads.observability import record_parser_failure, record_scan, start_span
from session_threads.parsers.records import (
    RECORD_RESPONSE_ITEM,
    RECORD_SESSION_META,
    LogRecord,
    ReadStats,
    extract_message_text,
    iter_log_records,
)
from session_threads.parsers.scanner import collect_session_files
from session_threads.path_utils import normalize_workspace_path

logger = logging.getLogger("session_threads.parsers")


class SessionLogReadError(OSError):
    """A session log existed but could not be opened or read."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to read session log {path}: {cause}")
        self.path = path
        self.cause = cause


def _latest(current: int | None, candidate: int | None) -> int | None:
    if candidate is None:
        return current
    if current is None:
        return candidate
    return max(current, candidate)


def _read_records(path: Path) -> Iterator[LogRecord]:
    stats = ReadStats()
    try:
        yield from iter_log_records(path, stats)
    except OSError as exc:
        raise SessionLogReadError(path, exc) from exc
    if stats.skipped:
        logger.debug("Skipped %d of %d unparsable lines in %s", stats.skipped, stats.lines, path)
        record_parser_failure("session_log", count=stats.skipped)


@dataclass
class _SummaryAccumulator:
    session_id: str | None = None
    cwd: str | None = None
    created_at: int | None = None
    updated_at: int | None = None
    last_user: str | None = None
    last_assistant: str | None = None

    def observe(self, record: LogRecord) -> None:
        self.updated_at = _latest(self.updated_at, record.timestamp)
        if record.type == RECORD_SESSION_META:
            session_id = record.payload_str("id")
            if session_id is not None:
                self.session_id = session_id
            cwd = record.payload_str("cwd")
            if cwd is not None:
                self.cwd = cwd
            created_at = _payload_timestamp(record)
            if created_at is not None:
                self.created_at = created_at
            return
        if record.type != RECORD_RESPONSE_ITEM:
            return
        if record.payload_str("type") != "message":
            return
        text = extract_message_text(record.payload_field("content"))
        if not text:
            return
        role = record.payload_str("role")
        if role == "assistant":
            self.last_assistant = text
        elif role == "user":
            self.last_user = text

    @property
    def preview(self) -> str:
        return self.last_assistant or self.last_user or ""


def _payload_timestamp(record: LogRecord) -> int | None:
    return parse_timestamp_ms(record.payload_field("timestamp"))


def _summarize_file(path: Path) -> _SummaryAccumulator:
    accumulator = _SummaryAccumulator()
    for record in _read_records(path):
        accumulator.observe(record)
    return accumulator


def list_session_threads(
    sessions_root: Path,
    workspace_path: str,
    limit: int | None = None,
) -> list[SessionSummary]:
    """List the sessions recorded for ``workspace_path``, most recent first.

    A missing ``sessions_root`` yields an empty list. A log that cannot be
    opened raises :class:`SessionLogReadError` and aborts the whole listing.
    """
    root = Path(sessions_root)
    if not root.exists():
        logger.debug("Sessions root %s does not exist", root)
        return []

    started = time.perf_counter()
    target_path = normalize_workspace_path(workspace_path)
    files = collect_session_files(root)
    results: list[SessionSummary] = []

    with start_span("session_threads.list", {"sessions_root": str(root), "files": len(files)}):
        try:
            for path in files:
                summary = _summarize_file(path)
                if summary.cwd is None:
                    continue
                if normalize_workspace_path(summary.cwd) != target_path:
                    continue
                if summary.session_id is None:
                    continue
                results.append(
                    SessionSummary(
                        id=summary.session_id,
                        cwd=workspace_path,
                        preview=summary.preview,
                        createdAt=summary.created_at,
                        updatedAt=summary.updated_at if summary.updated_at is not None else summary.created_at,
                    )
                )
        except SessionLogReadError:
            record_scan("list", "error", (time.perf_counter() - started) * 1000, files=len(files))
            raise

    results.sort(key=lambda item: item.updatedAt or 0, reverse=True)
    if limit is not None:
        results = results[: max(0, limit)]

    duration_ms = (time.perf_counter() - started) * 1000
    record_scan("list", "success", duration_ms, files=len(files))
    logger.debug(
        "Listed %d sessions for %s from %d files in %.1fms",
        len(results),
        workspace_path,
        len(files),
        duration_ms,
    )
    return results


def _matches_session(path: Path, session_id: str, strict: bool) -> bool:
    if strict:
        return path.stem == session_id or path.stem.endswith(f"-{session_id}")
    return session_id in path.name


def find_session_file(sessions_root: Path, session_id: str, *, strict: bool = False) -> Path | None:
    """Return the first scanned log whose name matches ``session_id``.

    The default lookup is a substring match on the file name, so an id that
    is a fragment of several names resolves to whichever the scan visits first.
    """
    root = Path(sessions_root)
    if not root.exists():
        return None
    matches = [path for path in collect_session_files(root) if _matches_session(path, session_id, strict)]
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            "Session id %r matches %d log files; using %s",
            session_id,
            len(matches),
            matches[0],
        )
    return matches[0]


@dataclass
class _ThreadBuilder:
    session_id: str
    cwd: str | None = None
    created_at: int | None = None
    updated_at: int | None = None
    preview: str | None = None
    items: list[ThreadItem] = field(default_factory=list)
    index: int = 0

    def observe(self, record: LogRecord) -> None:
        self.updated_at = _latest(self.updated_at, record.timestamp)
        if record.type == RECORD_SESSION_META:
            cwd = record.payload_str("cwd")
            if cwd is not None:
                self.cwd = cwd
            created_at = _payload_timestamp(record)
            if created_at is not None:
                self.created_at = created_at
            return
        if record.type != RECORD_RESPONSE_ITEM:
            return

        payload_type = record.payload_str("type")
        item_id = record.payload_str("id")
        if item_id is None:
            item_id = f"session-{self.session_id}-{self.index}"
        self.index += 1

        if payload_type == "message":
            text = extract_message_text(record.payload_field("content"))
            if not text:
                return
            role = record.payload_str("role")
            if role == "assistant":
                self.preview = text
                self.items.append(AgentMessageItem(id=item_id, text=text))
            elif role == "user":
                self.items.append(
                    UserMessageItem(id=item_id, content=[TextContentPart(text=text)])
                )
        elif payload_type == "reasoning":
            self.items.append(
                ReasoningItem(
                    id=item_id,
                    summary=record.payload_str("summary") or "",
                    content=record.payload_str("content") or "",
                )
            )

    def build(self) -> SessionThread:
        return SessionThread(
            id=self.session_id,
            cwd=self.cwd,
            preview=self.preview or "",
            createdAt=self.created_at,
            updatedAt=self.updated_at if self.updated_at is not None else self.created_at,
            turns=[ThreadTurn(id=f"turn-{self.session_id}-0", items=self.items)],
        )


def load_session_thread(
    sessions_root: Path,
    session_id: str,
    *,
    strict: bool = False,
) -> SessionThread | None:
    """Reconstruct one session as a single-turn thread, or ``None`` if absent."""
    started = time.perf_counter()
    path = find_session_file(sessions_root, session_id, strict=strict)
    if path is None:
        record_scan("load", "not_found", (time.perf_counter() - started) * 1000)
        return None

    builder = _ThreadBuilder(session_id=session_id)
    with start_span("session_threads.load", {"session_id": session_id, "path": str(path)}):
        try:
            for record in _read_records(path):
                builder.observe(record)
        except SessionLogReadError:
            record_scan("load", "error", (time.perf_counter() - started) * 1000, files=1)
            raise

    thread = builder.build()
    record_scan("load", "success", (time.perf_counter() - started) * 1000, files=1)
    logger.debug("Loaded session %s with %d items from %s", session_id, len(builder.items), path)
    return thread
