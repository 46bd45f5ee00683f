"""Unit tests for the session repository and its stores."""

import json
from datetime import timezone
from pathlib import Path

import pytest
import pytest_check as check

from src.models.schemas import DEFAULT_SESSION_TITLE, Session
from src.session.errors import MessageValidationError, SessionNotFoundError
from src.session.repository import SessionRepository, derive_title
from src.session.store import MemoryStore, SqliteStore
from src.session.timeline import MessageTimeline


def _session_with(*turns: tuple[str, str]) -> Session:
    session = Session()
    timeline = MessageTimeline(session)
    for question, answer in turns:
        timeline.append_user(question)
        timeline.append_assistant(answer)
    return session


class TestDeriveTitle:
    """Tests for title derivation from the first user message."""

    def test_truncates_to_thirty_characters(self) -> None:
        """Long questions are cut to 30 characters plus an ellipsis."""
        session = _session_with(("Explain closures in JavaScript in depth", "Sure."))

        assert derive_title(session) == "Explain closures in JavaScript..."

    def test_short_question_still_gets_suffix(self) -> None:
        """The ellipsis is appended even when nothing was cut."""
        session = _session_with(("Hi", "Hello"))

        assert derive_title(session) == "Hi..."

    def test_no_user_message_means_no_title(self) -> None:
        """An empty session has no derived title."""
        assert derive_title(Session()) is None


class TestSessionLifecycle:
    """Tests for create, load, delete and rename."""

    def test_create_makes_session_current(self, repository: SessionRepository) -> None:
        """A new session is empty, titled by default and current."""
        session = repository.create()

        check.equal(repository.current_id, session.id)
        check.equal(session.title, DEFAULT_SESSION_TITLE)
        check.equal(session.messages, [])

    def test_list_is_newest_first(self, repository: SessionRepository) -> None:
        """The most recently created session is listed first."""
        first = repository.create()
        second = repository.create()

        assert [s.id for s in repository.list()] == [second.id, first.id]

    def test_ensure_current_reuses_selected_session(self, repository: SessionRepository) -> None:
        """ensure_current only creates a session when none is selected."""
        session = repository.ensure_current()

        check.equal(repository.ensure_current().id, session.id)
        repository.clear_current()
        check.not_equal(repository.ensure_current().id, session.id)

    def test_load_selects_session(self, repository: SessionRepository) -> None:
        """Loading a session makes it current without changing it."""
        first = repository.create()
        repository.create()

        loaded = repository.load(first.id)

        check.equal(loaded.id, first.id)
        check.equal(repository.current_id, first.id)

    def test_load_unknown_session_raises(self, repository: SessionRepository) -> None:
        """Loading an unknown id raises SessionNotFoundError."""
        with pytest.raises(SessionNotFoundError):
            repository.load("missing")

    def test_delete_current_clears_pointer(self, repository: SessionRepository) -> None:
        """Deleting the current session leaves no session selected."""
        session = repository.create()

        repository.delete(session.id)

        check.is_none(repository.current_id)
        check.equal(repository.list(), [])

    def test_delete_other_keeps_current(self, repository: SessionRepository) -> None:
        """Deleting another session keeps the current pointer."""
        other = repository.create()
        current = repository.create()

        repository.delete(other.id)

        check.equal(repository.current_id, current.id)

    def test_delete_unknown_is_noop(self, repository: SessionRepository) -> None:
        """Deleting an unknown id does nothing."""
        repository.create()

        repository.delete("missing")

        assert len(repository.list()) == 1

    def test_rename_sets_title(self, repository: SessionRepository) -> None:
        """An explicit title replaces the current one."""
        session = repository.create()

        repository.rename(session.id, "  Closures  ")

        assert repository.get(session.id).title == "Closures"

    def test_rename_rejects_empty_title(self, repository: SessionRepository) -> None:
        """An empty title raises MessageValidationError."""
        session = repository.create()

        with pytest.raises(MessageValidationError):
            repository.rename(session.id, "   ")


class TestSave:
    """Tests for saving sessions and title derivation on save."""

    def test_first_save_with_messages_derives_title(self, repository: SessionRepository) -> None:
        """The title is derived from the first user message."""
        session = repository.create()
        timeline = MessageTimeline(session)
        timeline.append_user("Explain closures in JavaScript in depth")
        timeline.append_assistant("A closure is...")

        repository.save(session)

        assert repository.get(session.id).title == "Explain closures in JavaScript..."

    def test_later_messages_keep_title(self, repository: SessionRepository) -> None:
        """Subsequent turns do not change the derived title."""
        session = repository.create()
        timeline = MessageTimeline(session)
        timeline.append_user("First question")
        timeline.append_assistant("First answer")
        repository.save(session)

        timeline.append_user("A completely different question")
        timeline.append_assistant("Second answer")
        repository.save(session)

        assert repository.get(session.id).title == "First question..."

    def test_renamed_title_survives_save(self, repository: SessionRepository) -> None:
        """An explicit title is not overwritten by derivation."""
        session = repository.create()
        repository.rename(session.id, "Pinned")
        MessageTimeline(session).append_user("Question")

        repository.save(session)

        assert repository.get(session.id).title == "Pinned"

    def test_save_unknown_session_inserts_it(self, repository: SessionRepository) -> None:
        """Saving a session that is not indexed adds it."""
        session = _session_with(("q", "a"))

        repository.save(session)

        assert repository.get(session.id) is session


class TestPersistence:
    """Tests for the round trip through the store."""

    def test_sessions_survive_reload(self, store: MemoryStore) -> None:
        """A new repository over the same store restores every message."""
        repository = SessionRepository(store)
        session = repository.create()
        timeline = MessageTimeline(session)
        timeline.append_user("Hi")
        timeline.append_assistant("Hello!")
        repository.save(session)

        restored = SessionRepository(store).get(session.id)

        check.equal(restored.title, "Hi...")
        check.equal([m.content for m in restored.messages], ["Hi", "Hello!"])
        check.equal(restored.messages, session.messages)

    def test_current_pointer_is_not_persisted(self, store: MemoryStore) -> None:
        """A freshly restored repository has no current session."""
        SessionRepository(store).create()

        assert SessionRepository(store).current_id is None

    def test_stored_records_use_camel_case(self, store: MemoryStore) -> None:
        """Records are written with camelCase field names."""
        repository = SessionRepository(store)
        repository.save(_session_with(("q", "a")))

        record = json.loads(store.get("chat_sessions"))[0]

        check.is_in("createdAt", record)
        check.is_in("createdAt", record["messages"][0])

    def test_invalid_records_are_dropped(self, store: MemoryStore) -> None:
        """Records that fail validation are skipped on restore."""
        good = _session_with(("q", "a")).model_dump(mode="json", by_alias=True)
        store.set("chat_sessions", json.dumps([good, {"title": 5}, "junk"]))

        sessions = SessionRepository(store).list()

        assert [s.id for s in sessions] == [good["id"]]

    def test_unreadable_json_restores_empty(self, store: MemoryStore) -> None:
        """A corrupt session list is treated as empty."""
        store.set("chat_sessions", "{not json")

        assert SessionRepository(store).list() == []

    def test_restore_orders_newest_first(self, store: MemoryStore) -> None:
        """Restored sessions are sorted by creation time, newest first."""
        older = Session(created_at="2024-01-01T00:00:00Z")
        newer = Session(created_at="2024-06-01T00:00:00Z")
        payload = [s.model_dump(mode="json", by_alias=True) for s in (older, newer)]
        store.set("chat_sessions", json.dumps(payload))

        sessions = SessionRepository(store).list()

        assert [s.id for s in sessions] == [newer.id, older.id]

    def test_restore_mixes_naive_and_aware_timestamps(self, store: MemoryStore) -> None:
        """Timestamps without an offset are read as UTC and sort with the rest."""
        aware = Session(created_at="2024-01-01T00:00:00Z").model_dump(mode="json", by_alias=True)
        naive = Session().model_dump(mode="json", by_alias=True)
        naive["createdAt"] = "2024-02-01T00:00:00"
        store.set("chat_sessions", json.dumps([aware, naive]))

        repository = SessionRepository(store)

        check.equal([s.id for s in repository.list()], [naive["id"], aware["id"]])
        check.equal(repository.get(naive["id"]).created_at.tzinfo, timezone.utc)

    def test_namespaces_are_independent(self, store: MemoryStore) -> None:
        """Repositories under different namespaces do not share sessions."""
        SessionRepository(store, namespace="chat_sessions").create()

        assert SessionRepository(store, namespace="document_chat_sessions").list() == []


class TestStores:
    """Tests for the key-value store backends."""

    def test_memory_store_get_set_delete(self) -> None:
        """MemoryStore round-trips and deletes values."""
        store = MemoryStore()
        store.set("k", "v")
        check.equal(store.get("k"), "v")

        store.delete("k")
        check.is_none(store.get("k"))

    def test_sqlite_store_persists_across_instances(self, tmp_path: Path) -> None:
        """Values written by one SqliteStore are read by another."""
        SqliteStore(tmp_path / "sessions.db").set("k", "v1")
        store = SqliteStore(tmp_path / "sessions.db")
        store.set("k", "v2")

        check.equal(SqliteStore(tmp_path / "sessions.db").get("k"), "v2")
        store.delete("k")
        check.is_none(store.get("k"))

    def test_sqlite_store_forces_db_suffix(self, tmp_path: Path) -> None:
        """The database file always ends in .db."""
        store = SqliteStore(tmp_path / "nested" / "sessions")

        check.equal(store.db_path.suffix, ".db")
        check.is_true(store.db_path.exists())

    def test_sqlite_backed_repository_restores_sessions(self, tmp_path: Path) -> None:
        """Sessions saved through SQLite survive a new repository."""
        repository = SessionRepository(SqliteStore(tmp_path / "sessions.db"))
        session = _session_with(("Persist me", "Done"))
        repository.save(session)

        restored = SessionRepository(SqliteStore(tmp_path / "sessions.db"))

        assert restored.get(session.id).messages == session.messages
