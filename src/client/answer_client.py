"""HTTP client for the answering service and the document collaborators.

All calls are single request/response round trips; transport problems surface
as ``TransportError`` so the orchestrator can roll the turn back.
"""

import logging
from typing import Any

import httpx

from src.client.answers import DecodedAnswer, decode_answer
from src.client.config import ClientConfig, get_client_config
from src.models.schemas import ChatProxyRequest, DocumentChatRequest, DocumentDeleteRequest
from src.session.errors import TransportError

logger = logging.getLogger(__name__)


class AnswerServiceClient:
    """Async client wrapping ``httpx.AsyncClient``.

    Args:
        config: Client configuration; loaded from the environment if omitted.
        http_client: Preconfigured client, e.g. one with a mock transport.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._client = http_client or httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.request_timeout,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "AnswerServiceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, *, expect_json: bool = True, **kwargs: Any) -> Any:
        try:
            response = await self._client.post(path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"POST {path} failed with HTTP {status}")
            raise TransportError(f"HTTP {status}", status_code=status) from e
        except httpx.RequestError as e:
            logger.warning(f"POST {path} failed: {e}")
            raise TransportError(f"Connection failed: {e}") from e

        if not expect_json and not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "Answering service returned a non-JSON body",
                status_code=response.status_code,
            ) from e

    async def ask(self, message: str) -> DecodedAnswer:
        """Send a free-chat prompt and decode the answer."""
        body = ChatProxyRequest(message=message).model_dump()
        return decode_answer(await self._post(self._config.chat_path, json=body))

    async def ask_documents(self, message: str, file_ids: str, user_id: str) -> DecodedAnswer:
        """Send a document-grounded prompt.

        Args:
            message: The user's prompt.
            file_ids: Comma-joined backend identifiers of the active documents.
            user_id: Owner of the documents.
        """
        body = DocumentChatRequest(message=message, file_id=file_ids, user_id=user_id)
        return decode_answer(
            await self._post(self._config.document_chat_path, json=body.model_dump(by_alias=True))
        )

    async def upload_document(
        self,
        filename: str,
        content: bytes,
        *,
        user_id: str,
        file_id: str,
    ) -> Any:
        """Hand a file to the upload collaborator; returns its (optional) JSON reply."""
        return await self._post(
            self._config.upload_path,
            expect_json=False,
            files={"file": (filename, content, "application/pdf")},
            data={"userId": user_id, "fileId": file_id},
        )

    async def delete_document(self, file_id: str, user_id: str) -> Any:
        body = DocumentDeleteRequest(file_id=file_id, user_id=user_id)
        return await self._post(
            self._config.delete_path,
            expect_json=False,
            json=body.model_dump(by_alias=True),
        )
