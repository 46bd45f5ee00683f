"""The user's document set and the upload/delete workflows around it.

The set is independent of any chat session: every document-mode turn reads
the set as it stands at submit time, so a deleted document drops out of the
next request's context without further bookkeeping.
"""

import json
import logging
import threading
from uuid import uuid4

from pydantic import ValidationError

from src.client.answer_client import AnswerServiceClient
from src.documents.validation import validate_pdf_upload
from src.models.schemas import Document
from src.session.errors import DocumentNotFoundError
from src.session.store import PersistentStore

logger = logging.getLogger(__name__)


class DocumentSet:
    """Documents owned by one user, newest upload first, persisted in a store."""

    def __init__(self, store: PersistentStore, user_id: str) -> None:
        self._store = store
        self.user_id = user_id
        self._key = f"documents:{user_id}"
        self._lock = threading.Lock()
        self._documents = self._restore()

    def _restore(self) -> list[Document]:
        raw = self._store.get(self._key)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unreadable document list for {self.user_id}: {e}")
            return []

        documents: list[Document] = []
        for record in records if isinstance(records, list) else []:
            try:
                documents.append(Document.model_validate(record))
            except ValidationError:
                logger.warning("Dropping invalid document record")
        documents.sort(key=lambda d: d.uploaded_at, reverse=True)
        return documents

    def _persist(self) -> None:
        payload = [d.model_dump(mode="json", by_alias=True) for d in self._documents]
        self._store.set(self._key, json.dumps(payload, ensure_ascii=False))

    def backend_ids(self) -> list[str]:
        return [document.file_id for document in self._documents]

    def context(self) -> str:
        """Comma-joined backend identifiers sent with a document-mode turn."""
        return ",".join(self.backend_ids())

    def __len__(self) -> int:
        return len(self._documents)

    def list(self) -> list[Document]:
        return list(self._documents)

    def get(self, document_id: str) -> Document:
        for document in self._documents:
            if document.id == document_id:
                return document
        raise DocumentNotFoundError(document_id)

    def add(self, document: Document) -> Document:
        with self._lock:
            self._documents.insert(0, document)
            self._persist()
        return document

    def remove(self, document_id: str) -> Document:
        with self._lock:
            document = self.get(document_id)
            self._documents.remove(document)
            self._persist()
        return document


class DocumentLibrary:
    """Upload and delete documents through the backend collaborators."""

    def __init__(self, documents: DocumentSet, client: AnswerServiceClient) -> None:
        self.documents = documents
        self._client = client

    async def upload(self, filename: str, content: bytes) -> Document:
        """Validate, upload and record a PDF.

        The backend file id is generated before the upload so the backend and
        the local record agree on it. The document is recorded only after the
        collaborator accepts the file.

        Raises:
            DocumentValidationError: If the file is not an acceptable PDF.
            TransportError: If the upload collaborator fails.
        """
        name = validate_pdf_upload(filename, content)
        file_id = str(uuid4())
        await self._client.upload_document(
            name, content, user_id=self.documents.user_id, file_id=file_id
        )
        document = self.documents.add(Document(name=name, file_id=file_id))
        logger.info(f"Uploaded document {name} as {file_id}")
        return document

    async def delete(self, document_id: str) -> Document:
        """Delete a document from the backend, then from the set.

        Raises:
            DocumentNotFoundError: If the id is not in the set.
            TransportError: If the backend did not confirm the delete.
        """
        document = self.documents.get(document_id)
        await self._client.delete_document(document.file_id, self.documents.user_id)
        removed = self.documents.remove(document_id)
        logger.info(f"Deleted document {document.name} ({document.file_id})")
        return removed
