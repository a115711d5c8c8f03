"""Explicit session object wiring the state machine together.

One ``KnowledgeSession`` exists per open window. It owns the state and
every component operating on it, and is torn down with ``aclose()``.
"""

import logging
from collections.abc import Iterable

from src.agent.config import SessionConfig
from src.models.schemas import ConversationEntry, Document, FileBlob, SessionState
from src.parsing.pdf_parser import filter_pdf_files
from src.session.collaborators import AnsweringAgent, DocumentUploader
from src.session.controller import QuerySubmissionController, SuggestionDispatcher
from src.session.history import ChatHistory
from src.session.progress import UploadProgressSimulator
from src.session.registry import DocumentRegistry

logger = logging.getLogger(__name__)


class KnowledgeSession:
    """User-facing operations of a knowledge search session.

    Attributes:
        state: The live session state observed by the presentation layer.
        documents: Document working set.
        history: Conversation log.
        controller: Query submission state machine.
        dispatcher: Suggested and follow-up question dispatch.
    """

    def __init__(
        self,
        config: SessionConfig,
        uploader: DocumentUploader,
        agent: AnsweringAgent,
    ) -> None:
        """Create an empty session.

        Args:
            config: Agent identifiers and progress bar timing.
            uploader: Upload collaborator.
            agent: Answering collaborator.
        """
        self.config = config
        self.state = SessionState()
        self.simulator = UploadProgressSimulator(
            self.state,
            tick_interval=config.upload_tick_interval,
            max_increment=config.upload_max_increment,
            cap=config.upload_progress_cap,
            reset_delay=config.upload_reset_delay,
        )
        self.documents = DocumentRegistry(self.state, uploader, self.simulator)
        self.history = ChatHistory(self.state)
        self.controller = QuerySubmissionController(
            self.state, self.history, agent, config.agent_id
        )
        self.dispatcher = SuggestionDispatcher(self.state, self.controller)
        self._collaborators = (uploader, agent)
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """Whether ``aclose()`` has run. A closed session ignores uploads and queries."""
        return self._closed

    async def upload(self, files: Iterable[FileBlob]) -> list[Document]:
        """Upload the PDFs among the picked files."""
        if self._closed:
            logger.debug("Ignoring upload on a closed session")
            return []
        return await self.documents.add(filter_pdf_files(files))

    def delete_document(self, document_id: str) -> bool:
        return self.documents.remove(document_id)

    def set_input(self, text: str) -> None:
        self.state.pending_input = text

    async def submit(self) -> ConversationEntry | None:
        """Submit the pending input."""
        if self._closed:
            logger.debug("Ignoring submission on a closed session")
            return None
        return await self.controller.submit()

    async def select_suggestion(self, question: str) -> ConversationEntry | None:
        if self._closed:
            logger.debug("Ignoring suggestion on a closed session")
            return None
        return await self.dispatcher.select(question)

    def clear_chat(self) -> None:
        self.history.clear()

    def dismiss_error(self) -> None:
        self.state.last_error = None

    async def aclose(self) -> None:
        """Tear down the session.

        Cancels the progress simulation, discards the outcome of any upload or
        query still in flight, and closes collaborators that expose ``aclose``.
        Later uploads and queries are ignored.
        """
        if self._closed:
            return
        self._closed = True

        self.documents.close()
        self.history.invalidate()
        await self.simulator.aclose()

        closed: set[int] = set()
        for collaborator in self._collaborators:
            if id(collaborator) in closed:
                continue
            closed.add(id(collaborator))
            aclose = getattr(collaborator, "aclose", None)
            if aclose is not None:
                await aclose()
        logger.info("Session closed")

    async def __aenter__(self) -> "KnowledgeSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
