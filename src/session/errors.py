"""Error types raised by the session engine and its collaborators."""


class ChatClientError(Exception):
    """Base class for all chat front-end errors."""

    pass


class MessageValidationError(ChatClientError):
    """Raised when user input is rejected before any state change."""

    pass


class SessionNotFoundError(ChatClientError):
    """Raised when a session id is not in the index."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class TransportError(ChatClientError):
    """Raised when the answering service cannot be reached or answers non-2xx."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(TransportError):
    """Raised when an answer body carries no usable output (strict mode only)."""

    pass


class DocumentValidationError(ChatClientError):
    """Raised when a file is rejected before upload."""

    pass


class DocumentNotFoundError(ChatClientError):
    """Raised when a document id is not in the document set."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id
