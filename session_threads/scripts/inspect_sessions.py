#!/usr/bin/env python3
"""Inspect JSONL session logs from the command line.

Usage:
  python -m session_threads.scripts.inspect_sessions list --workspace /path/to/repo
  python -m session_threads.scripts.inspect_sessions list --workspace C:\\repo --limit 5
  python -m session_threads.scripts.inspect_sessions show 019a1b2c --strict
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from session_threads import config
from session_threads.date_utils import format_timestamp_ms
from session_threads.parsers.sessions import (
    SessionLogReadError,
    list_session_threads,
    load_session_thread,
)


def _run_list(sessions_dir: Path, workspace: str, limit: int | None, as_json: bool) -> int:
    sessions = list_session_threads(sessions_dir, workspace, limit)
    if as_json:
        print(json.dumps([session.model_dump() for session in sessions], indent=2))
        return 0
    if not sessions:
        print(f"No sessions found for {workspace}")
        return 0
    for session in sessions:
        updated = format_timestamp_ms(session.updatedAt) or "-"
        print(f"{session.id}  {updated}  {session.preview[:80]}")
    return 0


def _run_show(sessions_dir: Path, session_id: str, strict: bool) -> int:
    thread = load_session_thread(sessions_dir, session_id, strict=strict)
    if thread is None:
        print(f"Session not found: {session_id}", file=sys.stderr)
        return 1
    print(json.dumps(thread.model_dump(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="List or show log-derived sessions")
    parser.add_argument(
        "--sessions-dir",
        default=str(config.SESSIONS_DIR),
        help="Directory holding session logs (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List sessions recorded for a workspace")
    list_parser.add_argument("--workspace", required=True, help="Workspace path to match against session cwd")
    list_parser.add_argument("--limit", type=int, default=config.DEFAULT_LIST_LIMIT or None, help="Maximum sessions to print")
    list_parser.add_argument("--json", action="store_true", help="Print summaries as JSON")

    show_parser = subparsers.add_parser("show", help="Print one session thread as JSON")
    show_parser.add_argument("session_id", help="Session id (matched as a file name substring)")
    show_parser.add_argument("--strict", action="store_true", help="Require the file name to end with the id")

    args = parser.parse_args(argv)
    sessions_dir = Path(args.sessions_dir).expanduser()
    try:
        if args.command == "list":
            return _run_list(sessions_dir, args.workspace, args.limit, args.json)
        return _run_show(sessions_dir, args.session_id, args.strict)
    except SessionLogReadError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
