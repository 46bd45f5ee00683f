"""Webhook proxy endpoints.

The browser-facing client never talks to the automation webhooks directly;
these routes forward each call and pass the upstream JSON back unchanged.

Endpoints:
    - POST /chat-proxy: Free-chat question
    - POST /pdf-chat: Document-grounded question
    - POST /pdf-upload: Multipart document upload
    - POST /pdf-delete: Document removal
"""

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Body, File, Form, HTTPException, Request, UploadFile, status
from pydantic import ValidationError

from src.api.config import ProxyConfig, get_proxy_config
from src.models.schemas import ChatProxyRequest, DocumentChatRequest, DocumentDeleteRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["proxy"])


class UpstreamError(Exception):
    """Raised when a webhook cannot be reached or rejects the call."""

    pass


class WebhookForwarder:
    """Forwards proxy calls to the configured webhooks.

    Args:
        config: Proxy configuration; loaded from the environment if omitted.
        http_client: Preconfigured client, e.g. one with a mock transport.
    """

    def __init__(
        self,
        config: ProxyConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or get_proxy_config()
        self._client = http_client or httpx.AsyncClient(timeout=self.config.timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def forward(self, url: str, **kwargs: Any) -> Any:
        """POST to a webhook and return its JSON body.

        Raises:
            UpstreamError: On connection failure, non-2xx status or non-JSON body.
        """
        try:
            response = await self._client.post(url, **kwargs)
        except httpx.RequestError as e:
            raise UpstreamError(f"Connection to webhook failed: {e}") from e

        logger.info(f"Webhook {url} responded with status {response.status_code}")
        if not response.is_success:
            logger.error(f"Webhook error {response.status_code}: {response.text[:200]}")
            raise UpstreamError(f"Webhook returned status {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("Webhook returned a non-JSON body") from e


def _forwarder(request: Request) -> WebhookForwarder:
    return request.app.state.forwarder


def _upstream_failure(error: UpstreamError, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": str(error), "details": details},
    )


@router.post("/chat-proxy")
async def chat_proxy(payload: ChatProxyRequest, request: Request) -> Any:
    """Forward a free-chat question.

    Returns:
        The webhook's JSON answer, e.g. ``[{"output": "..."}]``.

    Raises:
        422: Empty or missing message.
        500: Webhook unreachable or failed.
    """
    forwarder = _forwarder(request)
    try:
        return await forwarder.forward(forwarder.config.chat_webhook_url, json=payload.model_dump())
    except UpstreamError as e:
        logger.error(f"Error in chat-proxy: {e}")
        raise _upstream_failure(e, "Failed to communicate with the chatbot backend") from e


@router.post("/pdf-chat")
async def pdf_chat(payload: DocumentChatRequest, request: Request) -> Any:
    """Forward a document-grounded question with the active document ids."""
    forwarder = _forwarder(request)
    try:
        return await forwarder.forward(
            forwarder.config.document_chat_webhook_url,
            json=payload.model_dump(by_alias=True),
        )
    except UpstreamError as e:
        logger.error(f"Error in pdf-chat: {e}")
        raise _upstream_failure(e, "Failed to communicate with the document backend") from e


@router.post("/pdf-upload")
async def pdf_upload(
    request: Request,
    file: UploadFile | None = File(None),
    userId: str | None = Form(None),  # noqa: N803 - wire field name
    fileId: str | None = Form(None),  # noqa: N803 - wire field name
) -> Any:
    """Forward a document upload as multipart form data.

    Raises:
        400: File, userId or fileId missing.
        500: Webhook unreachable or failed.
    """
    if file is None or not userId or not fileId:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File, userId, and fileId are required",
        )

    content = await file.read()
    forwarder = _forwarder(request)
    try:
        return await forwarder.forward(
            forwarder.config.upload_webhook_url,
            files={"file": (file.filename or "document.pdf", content, file.content_type)},
            data={"userId": userId, "fileId": fileId},
        )
    except UpstreamError as e:
        logger.error(f"Upload error: {e}")
        raise _upstream_failure(e, "Failed to upload file to webhook") from e


@router.post("/pdf-delete")
async def pdf_delete(request: Request, payload: dict[str, Any] = Body(...)) -> Any:
    """Forward a document delete.

    Raises:
        400: fileId or userId missing.
        500: Webhook unreachable or failed.
    """
    try:
        body = DocumentDeleteRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="fileId and userId are required",
        ) from e

    forwarder = _forwarder(request)
    try:
        return await forwarder.forward(
            forwarder.config.delete_webhook_url,
            json=body.model_dump(by_alias=True),
        )
    except UpstreamError as e:
        logger.error(f"Delete error: {e}")
        raise _upstream_failure(e, "Failed to delete file from webhook") from e
