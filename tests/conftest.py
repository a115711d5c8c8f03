"""Pytest fixtures and shared test configuration.

Provides in-memory collaborators and ready-made sessions for unit and
integration tests.

Fixtures:
    - config: SessionConfig with fast progress timings
    - uploader / agent: Scriptable fake collaborators
    - state: Empty SessionState
    - session: KnowledgeSession wired to the fakes, closed after the test
    - make_pdf: Factory for real PDF bytes with a given page count
"""

import asyncio
import io
from collections.abc import AsyncGenerator, Callable, Sequence
from typing import Any

import pytest
from pypdf import PdfWriter

from src.agent.config import SessionConfig
from src.models.schemas import FileBlob, QueryResult, SessionState, UploadResult
from src.session.session import KnowledgeSession


class FakeUploader:
    """Upload collaborator returning a scripted result.

    Set ``gate`` to an unset ``asyncio.Event`` to hold the upload open.
    """

    def __init__(self) -> None:
        self.result = UploadResult(success=True)
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.calls: list[list[FileBlob]] = []

    async def upload_documents(self, files: Sequence[FileBlob]) -> UploadResult:
        self.calls.append(list(files))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


class FakeAgent:
    """Answering collaborator returning a scripted result.

    Set ``gate`` to an unset ``asyncio.Event`` to hold the query open.
    """

    def __init__(self) -> None:
        self.result = QueryResult(
            success=True,
            response={"result": {"answer": "It is about testing.", "sources": []}},
        )
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[str, str]] = []

    async def query_agent(self, text: str, agent_id: str) -> QueryResult:
        self.calls.append((text, agent_id))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def config() -> SessionConfig:
    """Session config with timings short enough for tests.

    Returns:
        SessionConfig with fixed identifiers and millisecond timings.
    """
    return SessionConfig(
        agent_id="agent-test",
        knowledge_base_id="kb-test",
        api_base_url="http://test",
        upload_tick_interval=0.001,
        upload_reset_delay=0.01,
    )


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def agent() -> FakeAgent:
    return FakeAgent()


@pytest.fixture
def state() -> SessionState:
    return SessionState()


@pytest.fixture
async def session(
    config: SessionConfig, uploader: FakeUploader, agent: FakeAgent
) -> AsyncGenerator[KnowledgeSession]:
    """Create a session wired to the fake collaborators.

    Yields:
        An empty KnowledgeSession, closed after the test.
    """
    knowledge_session = KnowledgeSession(config, uploader=uploader, agent=agent)
    yield knowledge_session
    await knowledge_session.aclose()


@pytest.fixture
def make_pdf() -> Callable[[int], bytes]:
    """Return a factory producing valid PDF bytes with blank pages."""

    def _make(pages: int = 1) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=612, height=792)
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_blob(make_pdf: Callable[[int], bytes]) -> Callable[..., FileBlob]:
    """Return a factory for PDF file blobs."""

    def _make(name: str = "report.pdf", pages: int = 1, **kwargs: Any) -> FileBlob:
        return FileBlob(name=name, content=make_pdf(pages), **kwargs)

    return _make
