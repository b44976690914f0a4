"""Line-level decoding of session log records."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

from session_threads.date_utils import parse_timestamp_ms

RECORD_SESSION_META = "session_meta"
RECORD_RESPONSE_ITEM = "response_item"

_TEXT_CONTENT_TYPES = {"input_text", "output_text"}


@dataclass
class LogRecord:
    type: str
    timestamp: int | None
    payload: Any = None

    def payload_field(self, key: str) -> Any:
        if isinstance(self.payload, dict):
            return self.payload.get(key)
        return None

    def payload_str(self, key: str) -> str | None:
        value = self.payload_field(key)
        return value if isinstance(value, str) else None


@dataclass
class ReadStats:
    lines: int = 0
    skipped: int = 0


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def decode_record(raw: bytes | str) -> LogRecord | None:
    """Decode one log line; anything that is not a JSON object is ``None``.

    Lines outside strict JSON are rejected too: invalid UTF-8, a leading BOM,
    ``NaN``/``Infinity`` literals and unpaired surrogate escapes.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        parsed = json.loads(text, parse_constant=_reject_constant)
        if "\\u" in text:
            json.dumps(parsed, ensure_ascii=False).encode("utf-8")
    except (ValueError, RecursionError):
        return None
    if not isinstance(parsed, dict):
        return None
    entry_type = parsed.get("type")
    return LogRecord(
        type=entry_type if isinstance(entry_type, str) else "",
        timestamp=parse_timestamp_ms(parsed.get("timestamp")),
        payload=parsed.get("payload"),
    )


def iter_log_records(path: Path, stats: ReadStats | None = None) -> Iterator[LogRecord]:
    """Stream the records of one session log, skipping unparsable lines.

    Opening or reading the file raises ``OSError``; callers decide whether
    that is fatal.
    """
    with path.open("rb") as handle:
        for line in handle:
            if stats is not None:
                stats.lines += 1
            record = decode_record(line)
            if record is None:
                if stats is not None:
                    stats.skipped += 1
                continue
            yield record


def extract_message_text(content: Any) -> str:
    """Flatten ``input_text``/``output_text`` parts of message content."""
    if not isinstance(content, list):
        return ""
    parts: list[str] = []
    for entry in content:
        if not isinstance(entry, dict):
            continue
        entry_type = entry.get("type")
        if not isinstance(entry_type, str) or entry_type not in _TEXT_CONTENT_TYPES:
            continue
        text = entry.get("text")
        if isinstance(text, str) and text.strip():
            parts.append(text.strip())
    return " ".join(parts).strip()
