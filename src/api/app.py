"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.config import ProxyConfig
from src.api.routes import WebhookForwarder
from src.api.routes import router as proxy_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting chat webhook proxy...")
    yield
    logger.info("Shutting down chat webhook proxy...")
    await app.state.forwarder.aclose()


def create_app(
    config: ProxyConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Proxy configuration; loaded from the environment if omitted.
        http_client: Client used to reach the webhooks.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Chat Webhook Proxy",
        description=(
            "Forwards chat, document chat, upload and delete calls from the chat "
            "front-end to the answering-service webhooks."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.state.forwarder = WebhookForwarder(config, http_client)
    application.include_router(proxy_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chat-proxy"}

    return application


app = create_app()
