"""Session Threads FastAPI application entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from session_threads import config
from session_threads.observability import initialize as initialize_observability, shutdown as shutdown_observability
from session_threads.routers.api import sessions_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("session_threads")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info("Session threads API starting up (sessions dir: %s)", config.SESSIONS_DIR)
    initialize_observability(app)
    yield
    logger.info("Session threads API shutting down")
    shutdown_observability(app)


app = FastAPI(
    title="Session Threads API",
    description="Read-only listing and reconstruction of JSONL session logs",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        config.FRONTEND_ORIGIN,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(sessions_router)


@app.get("/api/health")
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "sessionsDir": str(config.SESSIONS_DIR),
        "sessionsDirExists": config.SESSIONS_DIR.exists(),
    }

