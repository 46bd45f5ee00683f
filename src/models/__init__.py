"""Pydantic models shared by the session engine, the client and the proxy API.

Models:
    - Message: Immutable committed chat message
    - Session: Persisted conversation thread
    - SessionSummary: Sidebar listing entry
    - Document: Uploaded document usable as answering context
    - ChatProxyRequest / DocumentChatRequest / DocumentDeleteRequest: wire bodies
"""

from src.models.schemas import (
    DEFAULT_SESSION_TITLE,
    ChatMode,
    ChatProxyRequest,
    Document,
    DocumentChatRequest,
    DocumentDeleteRequest,
    Message,
    Role,
    Session,
    SessionSummary,
    TurnState,
)

__all__ = [
    "DEFAULT_SESSION_TITLE",
    "ChatMode",
    "ChatProxyRequest",
    "Document",
    "DocumentChatRequest",
    "DocumentDeleteRequest",
    "Message",
    "Role",
    "Session",
    "SessionSummary",
    "TurnState",
]
