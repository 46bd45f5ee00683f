"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - store: In-memory PersistentStore
    - repository: SessionRepository over that store
    - client_config: ClientConfig pointing at a fake answering service
    - answer_service: Scriptable fake behind an httpx.MockTransport
    - answer_client: AnswerServiceClient wired to the fake
    - documents / library: DocumentSet and DocumentLibrary for the test user
    - make_orchestrator: Factory for RequestOrchestrator with instant reveal
"""

import asyncio
import json
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from src.client.answer_client import AnswerServiceClient
from src.client.config import ClientConfig
from src.documents.library import DocumentLibrary, DocumentSet
from src.session.orchestrator import RequestOrchestrator
from src.session.repository import SessionRepository
from src.session.reveal import AnswerRevealer, Granularity
from src.session.store import MemoryStore

TEST_USER_ID = "user-123"
ANSWER_BASE_URL = "http://answers.test"


class FakeAnswerService:
    """Stands in for the answering service and its document collaborators.

    Replies are scripted per path; every request is recorded. When ``gate`` is
    set, requests wait for it before answering.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.replies: dict[str, tuple[int, dict[str, Any]] | Exception] = {}
        self.default: tuple[int, dict[str, Any]] = (200, {"json": [{"output": "Default answer"}]})
        self.gate: asyncio.Event | None = None

    def reply(self, path: str, status_code: int = 200, **kwargs: Any) -> None:
        self.replies[path] = (status_code, kwargs)

    def fail(self, path: str, error: Exception) -> None:
        self.replies[path] = error

    def bodies(self, path: str) -> list[Any]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.get(request.url.path, self.default)
        if isinstance(reply, Exception):
            raise reply
        status_code, kwargs = reply
        return httpx.Response(status_code, **kwargs)


@pytest.fixture
def store() -> MemoryStore:
    """Return an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def repository(store: MemoryStore) -> SessionRepository:
    """Return a session repository over the in-memory store."""
    return SessionRepository(store)


@pytest.fixture
def client_config(tmp_path: Path) -> ClientConfig:
    """Return a client configuration for the fake answering service."""
    return ClientConfig(
        api_base_url=ANSWER_BASE_URL,
        user_id=TEST_USER_ID,
        data_dir=tmp_path,
        request_timeout=5.0,
        rollback_on_missing_output=False,
    )


@pytest.fixture
def answer_service() -> FakeAnswerService:
    """Return a scriptable fake answering service."""
    return FakeAnswerService()


@pytest.fixture
async def answer_client(
    client_config: ClientConfig, answer_service: FakeAnswerService
) -> AsyncGenerator[AnswerServiceClient, None]:
    """Create an AnswerServiceClient talking to the fake service.

    Yields:
        Client whose requests are served by ``answer_service``.
    """
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(answer_service),
        base_url=ANSWER_BASE_URL,
    )
    async with AnswerServiceClient(client_config, http_client=http_client) as client:
        yield client


@pytest.fixture
def documents(store: MemoryStore) -> DocumentSet:
    """Return the test user's empty document set."""
    return DocumentSet(store, TEST_USER_ID)


@pytest.fixture
def library(documents: DocumentSet, answer_client: AnswerServiceClient) -> DocumentLibrary:
    """Return a document library using the fake collaborators."""
    return DocumentLibrary(documents, answer_client)


@pytest.fixture
def notices() -> list[tuple[str, str]]:
    """Collects (message, level) notifications."""
    return []


@pytest.fixture
def make_orchestrator(
    repository: SessionRepository,
    answer_client: AnswerServiceClient,
    documents: DocumentSet,
    notices: list[tuple[str, str]],
) -> Callable[..., RequestOrchestrator]:
    """Return a factory for orchestrators with an instant reveal."""

    def factory(
        granularity: Granularity = Granularity.CHARACTER,
        rollback_on_missing_output: bool = False,
    ) -> RequestOrchestrator:
        return RequestOrchestrator(
            repository,
            answer_client,
            revealer=AnswerRevealer(granularity, min_step_delay=0),
            documents=documents,
            notify=lambda message, level: notices.append((message, level)),
            rollback_on_missing_output=rollback_on_missing_output,
        )

    return factory
