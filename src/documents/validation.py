"""Checks run on a PDF before it is handed to the upload collaborator."""

import logging

from src.session.errors import DocumentValidationError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"


def validate_pdf_upload(filename: str | None, content: bytes) -> str:
    """Validate an upload candidate.

    Args:
        filename: Original filename as picked by the user.
        content: Raw bytes of the file.

    Returns:
        The filename, stripped.

    Raises:
        DocumentValidationError: If the file is not an acceptable PDF.
    """
    name = (filename or "").strip()
    if not name:
        raise DocumentValidationError("Filename is required")

    if not name.lower().endswith(".pdf"):
        raise DocumentValidationError("Please upload a PDF file")

    if not content:
        raise DocumentValidationError("Empty file provided")

    if len(content) > MAX_FILE_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise DocumentValidationError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        logger.warning(f"Rejected {name}: missing PDF header")
        raise DocumentValidationError("Invalid PDF: file does not start with PDF header")

    return name
