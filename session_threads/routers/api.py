"""API router for log-derived sessions."""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query

from session_threads import config
from session_threads.models import SessionSummary, SessionThread
from session_threads.parsers.sessions import (
    SessionLogReadError,
    list_session_threads,
    load_session_thread,
)

logger = logging.getLogger("session_threads.api")


def _resolve_limit(limit: int | None) -> int | None:
    if limit is None:
        limit = config.DEFAULT_LIST_LIMIT or None
    return limit


# ── Sessions router ─────────────────────────────────────────────────

sessions_router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@sessions_router.get("", response_model=list[SessionSummary])
async def list_sessions(
    workspace: str = Query(..., description="Workspace path the sessions were recorded in"),
    limit: int | None = Query(None, ge=0, description="Maximum number of sessions to return"),
):
    """Return sessions for a workspace, most recently updated first."""
    try:
        return await asyncio.to_thread(
            list_session_threads,
            config.SESSIONS_DIR,
            workspace,
            _resolve_limit(limit),
        )
    except SessionLogReadError as exc:
        logger.error("Session listing failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@sessions_router.get("/{session_id}", response_model=SessionThread)
async def get_session(
    session_id: str,
    strict: bool = Query(False, description="Require the file name to end with the session id"),
):
    """Return a single session reconstructed as one turn."""
    try:
        thread = await asyncio.to_thread(
            load_session_thread,
            config.SESSIONS_DIR,
            session_id,
            strict=strict,
        )
    except SessionLogReadError as exc:
        logger.error("Session load failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    if thread is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return thread
