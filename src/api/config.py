"""Proxy configuration with environment variable loading.

Upstream webhook URLs the proxy forwards to. Defaults point at a local n8n
instance.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

_DEFAULT_WEBHOOK_BASE = "http://localhost:5678/webhook"


class ProxyConfig(BaseModel):
    """Configuration for the webhook proxy.

    Attributes:
        chat_webhook_url: Upstream free-chat webhook.
        document_chat_webhook_url: Upstream document-chat webhook.
        upload_webhook_url: Upstream document upload webhook.
        delete_webhook_url: Upstream document delete webhook.
        timeout: Seconds to wait for an upstream reply.
    """

    chat_webhook_url: str = Field(
        default_factory=lambda: os.getenv("CHAT_WEBHOOK_URL", f"{_DEFAULT_WEBHOOK_BASE}/chatbot"),
    )
    document_chat_webhook_url: str = Field(
        default_factory=lambda: os.getenv(
            "DOCUMENT_CHAT_WEBHOOK_URL", f"{_DEFAULT_WEBHOOK_BASE}/pdf-chat"
        ),
    )
    upload_webhook_url: str = Field(
        default_factory=lambda: os.getenv("UPLOAD_WEBHOOK_URL", f"{_DEFAULT_WEBHOOK_BASE}/upload-file"),
    )
    delete_webhook_url: str = Field(
        default_factory=lambda: os.getenv("DELETE_WEBHOOK_URL", f"{_DEFAULT_WEBHOOK_BASE}/delete-file"),
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("WEBHOOK_TIMEOUT", "120")),
        gt=0.0,
        description="Seconds to wait for an upstream reply",
    )

    @field_validator(
        "chat_webhook_url",
        "document_chat_webhook_url",
        "upload_webhook_url",
        "delete_webhook_url",
    )
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require http(s) webhook URLs."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Webhook URL must be http(s): {v!r}")
        return v


def get_proxy_config() -> ProxyConfig:
    """Create proxy configuration from environment.

    Returns:
        Configured ProxyConfig instance.
    """
    return ProxyConfig()
