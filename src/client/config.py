"""Client configuration with environment variable loading.

Pydantic-based configuration for reaching the answering service and for the
local session store.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

_DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


class ClientConfig(BaseModel):
    """Configuration for the chat front-end.

    Attributes:
        api_base_url: Base URL of the answering service (or the local proxy).
        chat_path: Path of the free-chat endpoint.
        document_chat_path: Path of the document-grounded chat endpoint.
        upload_path: Path of the document upload collaborator.
        delete_path: Path of the document delete collaborator.
        user_id: Identifier of the authenticated user.
        data_dir: Directory holding the local session database.
        request_timeout: Seconds to wait for an answer.
        rollback_on_missing_output: Treat answers without output as failures.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("CHAT_API_BASE_URL", "http://localhost:8000"),
        description="Answering service base URL",
    )
    chat_path: str = "/chat-proxy"
    document_chat_path: str = "/pdf-chat"
    upload_path: str = "/pdf-upload"
    delete_path: str = "/pdf-delete"
    user_id: str = Field(
        default_factory=lambda: os.getenv("CHAT_USER_ID", "local-user"),
        description="Authenticated user identifier",
    )
    data_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("CHAT_DATA_DIR", str(_DEFAULT_DATA_DIR))),
        description="Directory for the local session database",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("CHAT_REQUEST_TIMEOUT", "120")),
        gt=0.0,
        le=600.0,
        description="Seconds to wait for the answering service",
    )
    rollback_on_missing_output: bool = Field(
        default_factory=lambda: _env_flag("CHAT_ROLLBACK_ON_MISSING_OUTPUT"),
        description="Roll back the turn instead of committing the fallback reply",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("CHAT_API_BASE_URL must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        """Validate that a user id is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("User id required. Set CHAT_USER_ID in .env")
        return v.strip()

    @property
    def store_path(self) -> Path:
        return self.data_dir / "sessions.db"


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If a configured value is invalid.
    """
    return ClientConfig()
