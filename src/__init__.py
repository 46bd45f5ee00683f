"""Chat front-end for a remote answering service.

Free-form and document-grounded Q&A over persisted chat sessions, with
optimistic turns, rollback on failure and a client-side answer reveal.

Components:
    - session: Session store, repository, timelines, reveal and orchestration
    - client: HTTP client and configuration for the answering service
    - documents: The user's uploaded documents
    - api: Webhook proxy endpoints
    - ui: Web interface for chat interactions
    - models: Shared pydantic models
"""

__version__ = "0.1.0"
