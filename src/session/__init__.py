"""Conversational session engine.

Responsibilities:
    - Durable key-value storage of serialized sessions
    - Session index with create/list/load/delete/rename/save
    - Per-session timelines with optimistic append and rollback
    - Progressive reveal of complete answers
    - Turn orchestration against the answering service (``orchestrator``)

The orchestrator and workspace modules pull in the HTTP client and are
imported from their own modules rather than re-exported here.
"""

from src.session.errors import (
    ChatClientError,
    MalformedResponseError,
    MessageValidationError,
    SessionNotFoundError,
    TransportError,
)
from src.session.repository import SessionIndex, SessionRepository, derive_title
from src.session.reveal import AnswerRevealer, Granularity, reveal_steps
from src.session.store import MemoryStore, PersistentStore, SqliteStore
from src.session.timeline import MessageTimeline

__all__ = [
    "AnswerRevealer",
    "ChatClientError",
    "Granularity",
    "MalformedResponseError",
    "MemoryStore",
    "MessageTimeline",
    "MessageValidationError",
    "PersistentStore",
    "SessionIndex",
    "SessionNotFoundError",
    "SessionRepository",
    "SqliteStore",
    "TransportError",
    "derive_title",
    "reveal_steps",
]
