"""Integration tests for document upload and delete workflows.

The upload and delete collaborators are served by FakeAnswerService; the
document set is checked before and after each call.
"""

import httpx
import pytest
import pytest_check as check

from src.documents.library import DocumentLibrary
from src.session.errors import DocumentNotFoundError, DocumentValidationError, TransportError
from tests.conftest import TEST_USER_ID, FakeAnswerService

PDF_BYTES = b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<<>>\nendobj\n%%EOF\n"


class TestUpload:
    """Tests for DocumentLibrary.upload."""

    async def test_upload_records_document(
        self, library: DocumentLibrary, answer_service: FakeAnswerService
    ) -> None:
        """An accepted upload is recorded with the generated backend id."""
        answer_service.reply("/pdf-upload", json={"success": True})

        document = await library.upload("guide.pdf", PDF_BYTES)

        request = answer_service.requests[0]
        body = request.content
        check.equal(request.url.path, "/pdf-upload")
        check.is_in(b'name="userId"', body)
        check.is_in(TEST_USER_ID.encode(), body)
        check.is_in(document.file_id.encode(), body)
        check.is_in(b'filename="guide.pdf"', body)
        check.equal(library.documents.backend_ids(), [document.file_id])
        check.equal(document.name, "guide.pdf")

    async def test_upload_accepts_empty_reply(
        self, library: DocumentLibrary, answer_service: FakeAnswerService
    ) -> None:
        """Collaborators that reply with no body still confirm the upload."""
        answer_service.reply("/pdf-upload", content=b"")

        await library.upload("guide.pdf", PDF_BYTES)

        assert len(library.documents) == 1

    async def test_failed_upload_records_nothing(
        self, library: DocumentLibrary, answer_service: FakeAnswerService
    ) -> None:
        """A rejected upload leaves the document set unchanged."""
        answer_service.reply("/pdf-upload", status_code=500, json={"error": "boom"})

        with pytest.raises(TransportError):
            await library.upload("guide.pdf", PDF_BYTES)

        assert len(library.documents) == 0

    async def test_invalid_file_never_reaches_backend(
        self, library: DocumentLibrary, answer_service: FakeAnswerService
    ) -> None:
        """Validation failures are raised before any request."""
        with pytest.raises(DocumentValidationError, match="PDF"):
            await library.upload("notes.txt", b"hello")

        check.equal(answer_service.requests, [])
        check.equal(len(library.documents), 0)

    async def test_each_upload_gets_fresh_backend_id(self, library: DocumentLibrary) -> None:
        """Uploading the same file twice yields two distinct documents."""
        first = await library.upload("guide.pdf", PDF_BYTES)
        second = await library.upload("guide.pdf", PDF_BYTES)

        check.not_equal(first.file_id, second.file_id)
        check.equal(len(library.documents), 2)


class TestDelete:
    """Tests for DocumentLibrary.delete."""

    async def test_delete_after_confirmation(
        self, library: DocumentLibrary, answer_service: FakeAnswerService
    ) -> None:
        """A confirmed delete removes the document."""
        document = await library.upload("guide.pdf", PDF_BYTES)
        answer_service.reply("/pdf-delete", json={"success": True})

        await library.delete(document.id)

        check.equal(len(library.documents), 0)
        check.equal(
            answer_service.bodies("/pdf-delete"),
            [{"fileId": document.file_id, "userId": TEST_USER_ID}],
        )

    async def test_failed_delete_keeps_document(
        self, library: DocumentLibrary, answer_service: FakeAnswerService
    ) -> None:
        """Without confirmation the document stays in the set."""
        document = await library.upload("guide.pdf", PDF_BYTES)
        answer_service.fail("/pdf-delete", httpx.ReadTimeout("timed out"))

        with pytest.raises(TransportError):
            await library.delete(document.id)

        assert library.documents.get(document.id) == document

    async def test_delete_unknown_document(self, library: DocumentLibrary) -> None:
        """Deleting an unknown id raises DocumentNotFoundError."""
        with pytest.raises(DocumentNotFoundError):
            await library.delete("missing")
