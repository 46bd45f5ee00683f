"""FastAPI webhook proxy for the chat front-end.

Endpoints:
    - GET /health: Service health status
    - POST /chat-proxy: Free-chat questions
    - POST /pdf-chat: Document-grounded questions
    - POST /pdf-upload: Document uploads
    - POST /pdf-delete: Document removal
"""

from src.api.app import create_app

__all__ = ["create_app"]
