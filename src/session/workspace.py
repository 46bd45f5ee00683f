"""Wiring of the session engine for one client instance.

A workspace bundles the store, the free-chat and document-chat session
repositories, the document library and one orchestrator per chat mode, all
sharing a single answering-service client.
"""

import logging
from dataclasses import dataclass

from src.client.answer_client import AnswerServiceClient
from src.client.config import ClientConfig, get_client_config
from src.documents.library import DocumentLibrary, DocumentSet
from src.session.orchestrator import RequestOrchestrator
from src.session.repository import SessionRepository
from src.session.reveal import AnswerRevealer, Granularity
from src.session.store import PersistentStore, SqliteStore

logger = logging.getLogger(__name__)

CHAT_NAMESPACE = "chat_sessions"
DOCUMENT_CHAT_NAMESPACE = "document_chat_sessions"


@dataclass
class ChatWorkspace:
    """Engine components for one user on one client instance."""

    config: ClientConfig
    store: PersistentStore
    client: AnswerServiceClient
    chat_sessions: SessionRepository
    document_sessions: SessionRepository
    documents: DocumentSet
    library: DocumentLibrary
    chat: RequestOrchestrator
    document_chat: RequestOrchestrator

    async def aclose(self) -> None:
        await self.client.aclose()


def create_workspace(
    config: ClientConfig | None = None,
    store: PersistentStore | None = None,
    client: AnswerServiceClient | None = None,
) -> ChatWorkspace:
    """Build a workspace from configuration.

    Args:
        config: Client configuration; loaded from the environment if omitted.
        store: Storage backend; a SQLite file under ``config.data_dir`` if omitted.
        client: Answering-service client; built from ``config`` if omitted.

    Returns:
        A ready ChatWorkspace.
    """
    config = config or get_client_config()
    store = store or SqliteStore(config.store_path)
    client = client or AnswerServiceClient(config)

    documents = DocumentSet(store, config.user_id)
    chat_sessions = SessionRepository(store, namespace=CHAT_NAMESPACE)
    document_sessions = SessionRepository(store, namespace=DOCUMENT_CHAT_NAMESPACE)

    chat = RequestOrchestrator(
        chat_sessions,
        client,
        revealer=AnswerRevealer(Granularity.CHARACTER),
        rollback_on_missing_output=config.rollback_on_missing_output,
    )
    document_chat = RequestOrchestrator(
        document_sessions,
        client,
        revealer=AnswerRevealer(Granularity.WORD),
        documents=documents,
        user_id=config.user_id,
        rollback_on_missing_output=config.rollback_on_missing_output,
    )

    logger.info(f"Workspace ready for user {config.user_id}")
    return ChatWorkspace(
        config=config,
        store=store,
        client=client,
        chat_sessions=chat_sessions,
        document_sessions=document_sessions,
        documents=documents,
        library=DocumentLibrary(documents, client),
        chat=chat,
        document_chat=document_chat,
    )


# Module-level singleton instance
_workspace: ChatWorkspace | None = None


def get_workspace() -> ChatWorkspace:
    """Get or create the global workspace.

    Returns:
        The ChatWorkspace instance.
    """
    global _workspace
    if _workspace is None:
        _workspace = create_workspace()
    return _workspace


async def close_workspace() -> None:
    """Close the global workspace's HTTP client, if one was created."""
    global _workspace
    if _workspace is not None:
        await _workspace.aclose()
        _workspace = None
        logger.info("Workspace closed")
