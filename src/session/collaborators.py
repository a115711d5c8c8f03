"""Interfaces of the two external operations the session depends on."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from src.models.schemas import FileBlob, QueryResult, UploadResult


@runtime_checkable
class DocumentUploader(Protocol):
    """Transports already-filtered PDFs to the knowledge base."""

    async def upload_documents(self, files: Sequence[FileBlob]) -> UploadResult:
        """Upload files, raising UploadFailed or returning success=False on failure."""
        ...


@runtime_checkable
class AnsweringAgent(Protocol):
    """Answers a question against the uploaded documents."""

    async def query_agent(self, text: str, agent_id: str) -> QueryResult:
        """Ask a question, raising QueryFailed or returning success=False on failure."""
        ...
