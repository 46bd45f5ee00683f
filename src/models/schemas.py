from datetime import datetime, timezone
from enum import Enum
from typing import Annotated
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_SESSION_TITLE = "New Chat"


def _new_id() -> str:
    return uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Treat timestamps stored without an offset as UTC."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Role(str, Enum):
    """Speaker of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMode(str, Enum):
    """Which answering endpoint a turn is sent to."""

    CHAT = "chat"
    DOCUMENTS = "documents"


class TurnState(str, Enum):
    """Per-session request state.

    A session cycles idle -> sending -> succeeded|failed -> idle.
    """

    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Message(_CamelModel):
    """A committed chat message.

    Attributes:
        id: Opaque message identifier.
        role: The speaker (user or assistant).
        content: The message text.
        created_at: When the message was committed.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    role: Role
    content: str
    created_at: UtcDatetime = Field(default_factory=_utc_now)


class Session(_CamelModel):
    """A named, persisted conversation thread.

    Attributes:
        id: Opaque session identifier, unique within the store.
        title: Display title, derived from the first user message.
        messages: Chronological committed messages.
        created_at: Session creation timestamp.
    """

    id: str = Field(default_factory=_new_id)
    title: str = DEFAULT_SESSION_TITLE
    messages: list[Message] = Field(default_factory=list)
    created_at: UtcDatetime = Field(default_factory=_utc_now)

    def summary(self) -> "SessionSummary":
        return SessionSummary(
            id=self.id,
            title=self.title,
            created_at=self.created_at,
            message_count=len(self.messages),
        )


class SessionSummary(_CamelModel):
    """Listing entry for the session sidebar."""

    id: str
    title: str
    created_at: UtcDatetime
    message_count: int = Field(default=0, ge=0)


class Document(BaseModel):
    """An uploaded document usable as answering context.

    Attributes:
        id: Local record identifier.
        name: Display name (original filename).
        file_id: Identifier the backend knows the document by.
        uploaded_at: Upload timestamp.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1)
    file_id: str = Field(..., alias="fileId", min_length=1)
    uploaded_at: UtcDatetime = Field(default_factory=_utc_now, alias="uploadedAt")


class ChatProxyRequest(BaseModel):
    """Body of a free-chat request to the answering service."""

    message: str = Field(..., min_length=1)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class DocumentChatRequest(ChatProxyRequest):
    """Body of a document-grounded request.

    Attributes:
        file_id: Comma-joined backend identifiers of the active documents.
        user_id: Owner of the documents.
    """

    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(default="", alias="fileId")
    user_id: str = Field(..., alias="userId", min_length=1)


class DocumentDeleteRequest(BaseModel):
    """Body of a document delete request."""

    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(..., alias="fileId", min_length=1)
    user_id: str = Field(..., alias="userId", min_length=1)
