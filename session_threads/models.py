"""Pydantic models matching the host application's thread payloads."""
from __future__ import annotations
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from session_threads.config import SESSION_SOURCE

# ── Listing ─────────────────────────────────────────────────────────

class SessionSummary(BaseModel):
    id: str
    cwd: str
    preview: str = ""
    createdAt: Optional[int] = None
    updatedAt: Optional[int] = None
    source: str = SESSION_SOURCE


# ── Thread reconstruction ───────────────────────────────────────────

class TextContentPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class AgentMessageItem(BaseModel):
    id: str
    type: Literal["agentMessage"] = "agentMessage"
    text: str


class UserMessageItem(BaseModel):
    id: str
    type: Literal["userMessage"] = "userMessage"
    content: list[TextContentPart] = Field(default_factory=list)


class ReasoningItem(BaseModel):
    id: str
    type: Literal["reasoning"] = "reasoning"
    summary: str = ""
    content: str = ""


ThreadItem = Annotated[
    Union[AgentMessageItem, UserMessageItem, ReasoningItem],
    Field(discriminator="type"),
]


class ThreadTurn(BaseModel):
    id: str
    items: list[ThreadItem] = Field(default_factory=list)


class SessionThread(BaseModel):
    id: str
    cwd: Optional[str] = None
    preview: str = ""
    createdAt: Optional[int] = None
    updatedAt: Optional[int] = None
    turns: list[ThreadTurn] = Field(default_factory=list)
