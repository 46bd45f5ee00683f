"""Document library for document-grounded chat.

Responsibilities:
    - PDF validation before upload (extension, size, header)
    - The user's DocumentSet, persisted next to the chat sessions
    - Upload and delete through the backend collaborators

Text extraction and indexing happen on the backend, not here.
"""

from src.documents.library import DocumentLibrary, DocumentSet
from src.documents.validation import MAX_FILE_SIZE, validate_pdf_upload

__all__ = ["MAX_FILE_SIZE", "DocumentLibrary", "DocumentSet", "validate_pdf_upload"]
