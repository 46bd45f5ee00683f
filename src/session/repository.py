"""Session repository: the index of chat sessions and its persistence.

The whole session list is stored as one JSON document under the repository's
namespace key. Every mutation writes the list back, so the in-memory index is
only ever a cache of what the store holds.
"""

import json
import logging
import threading
from dataclasses import dataclass, field

from pydantic import ValidationError

from src.models.schemas import DEFAULT_SESSION_TITLE, Role, Session, SessionSummary
from src.session.errors import MessageValidationError, SessionNotFoundError
from src.session.store import PersistentStore
from src.session.timeline import MessageTimeline

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "chat_sessions"
TITLE_LENGTH = 30
TITLE_SUFFIX = "..."


def derive_title(session: Session) -> str | None:
    """Title for a session from its first user message, or None if it has none."""
    for message in session.messages:
        if message.role is Role.USER:
            return message.content[:TITLE_LENGTH] + TITLE_SUFFIX
    return None


@dataclass
class SessionIndex:
    """Sessions newest-created first plus the current-session pointer."""

    sessions: list[Session] = field(default_factory=list)
    current_id: str | None = None

    def find(self, session_id: str) -> Session | None:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None


class SessionRepository:
    """CRUD over chat sessions backed by a PersistentStore.

    Attributes:
        namespace: Store key holding this repository's sessions.
    """

    def __init__(self, store: PersistentStore, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._store = store
        self.namespace = namespace
        self._lock = threading.RLock()
        self._index = SessionIndex(sessions=self._restore())

    def _restore(self) -> list[Session]:
        raw = self._store.get(self.namespace)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unreadable session list in '{self.namespace}': {e}")
            return []
        if not isinstance(records, list):
            logger.warning(f"Discarding session list in '{self.namespace}': not a list")
            return []

        sessions: list[Session] = []
        for record in records:
            try:
                sessions.append(Session.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Dropping invalid session record: {e.error_count()} error(s)")
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        logger.info(f"Restored {len(sessions)} session(s) from '{self.namespace}'")
        return sessions

    def _persist(self) -> None:
        payload = [s.model_dump(mode="json", by_alias=True) for s in self._index.sessions]
        self._store.set(self.namespace, json.dumps(payload, ensure_ascii=False))

    @property
    def current_id(self) -> str | None:
        return self._index.current_id

    def current(self) -> Session | None:
        if self._index.current_id is None:
            return None
        return self._index.find(self._index.current_id)

    def timeline(self) -> MessageTimeline | None:
        """Timeline of the current session, or None when no session is selected."""
        session = self.current()
        return MessageTimeline(session) if session is not None else None

    def list(self) -> list[SessionSummary]:
        with self._lock:
            return [session.summary() for session in self._index.sessions]

    def get(self, session_id: str) -> Session:
        session = self._index.find(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def create(self) -> Session:
        """Create an empty session, make it current and persist it."""
        with self._lock:
            session = Session()
            self._index.sessions.insert(0, session)
            self._index.current_id = session.id
            self._persist()
        logger.info(f"Created session {session.id}")
        return session

    def ensure_current(self) -> Session:
        """Return the current session, creating one if none is selected."""
        with self._lock:
            session = self.current()
            return session if session is not None else self.create()

    def load(self, session_id: str) -> Session:
        """Select a session as current.

        Raises:
            SessionNotFoundError: If the id is not in the index.
        """
        with self._lock:
            session = self.get(session_id)
            self._index.current_id = session.id
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            session = self._index.find(session_id)
            if session is None:
                return
            self._index.sessions.remove(session)
            if self._index.current_id == session_id:
                self._index.current_id = None
            self._persist()
        logger.info(f"Deleted session {session_id}")

    def clear_current(self) -> None:
        """Deselect the current session; the next send starts a new one."""
        self._index.current_id = None

    def rename(self, session_id: str, title: str) -> Session:
        """Set an explicit title.

        Raises:
            MessageValidationError: If the title is empty.
            SessionNotFoundError: If the id is not in the index.
        """
        title = title.strip() if title else ""
        if not title:
            raise MessageValidationError("Title must not be empty")
        with self._lock:
            session = self.get(session_id)
            session.title = title
            self._persist()
        return session

    def save(self, session: Session) -> Session:
        """Upsert the whole session; the last write wins.

        Derives the title the first time the session has committed messages.
        """
        with self._lock:
            if session.title == DEFAULT_SESSION_TITLE:
                title = derive_title(session)
                if title is not None:
                    session.title = title

            existing = self._index.find(session.id)
            if existing is None:
                self._index.sessions.insert(0, session)
            elif existing is not session:
                position = self._index.sessions.index(existing)
                self._index.sessions[position] = session
            self._persist()
        return session
