"""Document working set for a session.

Uploads are single-flight: while one upload (or its completion hold) is
running, further ``add()`` calls are rejected rather than queued.
"""

import logging
from collections.abc import Sequence

from src.models.schemas import Document, FileBlob, SessionState, UploadResult
from src.parsing.pdf_parser import count_pages
from src.session.collaborators import DocumentUploader
from src.session.errors import UploadFailed
from src.session.progress import ProgressPhase, UploadProgressSimulator

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_ERROR = "Upload failed"


class DocumentRegistry:
    """Ordered collection of uploaded documents backed by ``SessionState.documents``."""

    def __init__(
        self,
        state: SessionState,
        uploader: DocumentUploader,
        simulator: UploadProgressSimulator,
    ) -> None:
        self._state = state
        self._uploader = uploader
        self._simulator = simulator
        self._closed = False

    @property
    def documents(self) -> list[Document]:
        """Snapshot of the working set in upload order."""
        return list(self._state.documents)

    @property
    def is_busy(self) -> bool:
        """Whether an upload is running or its progress bar has not reset yet."""
        return self._state.upload_in_flight or self._simulator.is_active

    def __len__(self) -> int:
        """Number of documents in the working set."""
        return len(self._state.documents)

    def get(self, document_id: str) -> Document | None:
        """Look up a document by id, or None if it is not in the working set."""
        for doc in self._state.documents:
            if doc.id == document_id:
                return doc
        return None

    async def add(self, files: Sequence[FileBlob]) -> list[Document]:
        """Upload files and record them as documents.

        Args:
            files: PDFs to upload, already filtered to the accepted type.

        Returns:
            The new documents in input order, or an empty list if the upload
            was rejected, failed (``last_error`` is set on failure) or
            resolved after ``close()``.
        """
        batch = list(files)
        if not batch or self._closed:
            return []
        if self.is_busy:
            logger.info(f"Ignoring upload of {len(batch)} file(s): another upload is running")
            return []

        self._state.upload_in_flight = True
        self._state.last_error = None
        self._simulator.start()

        try:
            result = await self._uploader.upload_documents(batch)
            if not result.success:
                raise UploadFailed(result.error or DEFAULT_UPLOAD_ERROR)
        except UploadFailed as e:
            if self._closed:
                logger.info(f"Discarding upload failure for a closed session: {e}")
                return []
            self._simulator.fail()
            self._state.last_error = str(e) or DEFAULT_UPLOAD_ERROR
            logger.warning(f"Upload of {len(batch)} file(s) failed: {e}")
            return []
        else:
            if self._closed:
                logger.info(f"Discarding upload of {len(batch)} file(s) for a closed session")
                return []
            new_docs = [self._build_document(file, result) for file in batch]
            self._state.documents.extend(new_docs)
            self._simulator.complete()
            logger.info(f"Uploaded {len(new_docs)} document(s)")
            return new_docs
        finally:
            # Unexpected errors and cancellation must not leave the bar running
            if self._simulator.phase is ProgressPhase.ADVANCING:
                self._simulator.fail()
            self._state.upload_in_flight = False

    def close(self) -> None:
        """Reject further uploads and discard the result of one still running."""
        self._closed = True

    def remove(self, document_id: str) -> bool:
        """Remove a document by id.

        Removing an unknown id is a no-op, so repeated deletes are safe.

        Returns:
            True if a document was removed.
        """
        remaining = [doc for doc in self._state.documents if doc.id != document_id]
        if len(remaining) == len(self._state.documents):
            return False

        self._state.documents[:] = remaining
        logger.info(f"Removed document {document_id}")
        return True

    @staticmethod
    def _build_document(file: FileBlob, result: UploadResult) -> Document:
        page_count = result.pages.get(file.name)
        if page_count is None:
            page_count = count_pages(file.content)

        return Document(
            name=file.name,
            size_bytes=file.size,
            page_count=page_count,
        )
