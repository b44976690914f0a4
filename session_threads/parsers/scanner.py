"""Discover session log files under a sessions root."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from session_threads.config import SESSION_LOG_SUFFIX

logger = logging.getLogger("session_threads.parsers")


def collect_session_files(root: Path, suffix: str = SESSION_LOG_SUFFIX) -> list[Path]:
    """Return every ``suffix`` file below ``root`` at any depth.

    Walks depth-first with an explicit stack. Directories that vanish or cannot
    be listed are skipped; a missing root yields an empty list.
    """
    stack = [Path(root)]
    files: list[Path] = []
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    path = Path(entry.path)
                    try:
                        is_dir = entry.is_dir()
                    except OSError:
                        is_dir = False
                    if is_dir:
                        stack.append(path)
                        continue
                    if path.suffix == suffix:
                        files.append(path)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            continue
    return files
