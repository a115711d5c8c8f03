"""Query submission state machine and suggested-question dispatch.

Submission lifecycle::

    IDLE -> SUBMITTING -> IDLE (agent entry appended)
                       -> IDLE (last_error set, nothing appended)

Only one query may be in flight per session. A response that resolves after
the chat was cleared (or the session closed) is discarded.
"""

import logging
from enum import Enum

from src.models.schemas import ConversationEntry, Role, SessionState
from src.session.collaborators import AnsweringAgent
from src.session.errors import QueryFailed, SessionError
from src.session.history import ChatHistory
from src.session.response import parse_agent_response

logger = logging.getLogger(__name__)

DEFAULT_QUERY_ERROR = "Failed to get response"

# Starter questions offered while the conversation is empty
SUGGESTED_QUESTIONS = (
    "What are the main topics covered in my documents?",
    "Can you summarize the key findings?",
    "What are the most important takeaways?",
    "How do these documents relate to each other?",
)


class SubmissionPhase(str, Enum):
    """Controller states."""

    IDLE = "idle"
    SUBMITTING = "submitting"


class QuerySubmissionController:
    """Accepts queries, calls the answering service and records the outcome."""

    def __init__(
        self,
        state: SessionState,
        history: ChatHistory,
        agent: AnsweringAgent,
        agent_id: str,
    ) -> None:
        """Initialize the controller.

        Args:
            state: Session state to read and update.
            history: Conversation log receiving user and agent entries.
            agent: Answering collaborator.
            agent_id: Identifier of the answering agent to query.
        """
        self._state = state
        self._history = history
        self._agent = agent
        self._agent_id = agent_id

    @property
    def phase(self) -> SubmissionPhase:
        """Current state, derived from ``submission_in_flight``."""
        if self._state.submission_in_flight:
            return SubmissionPhase.SUBMITTING
        return SubmissionPhase.IDLE

    def can_submit(self, text: str | None = None) -> bool:
        """Check whether a submission would leave the idle state.

        Args:
            text: Query to check, defaults to the pending input.

        Returns:
            True if the text is non-blank, nothing is in flight and at least
            one document is loaded.
        """
        query = self._state.pending_input if text is None else text
        return (
            bool(query.strip())
            and not self._state.submission_in_flight
            and bool(self._state.documents)
        )

    async def submit(self, text: str | None = None) -> ConversationEntry | None:
        """Submit a query to the answering service.

        Rejected submissions (blank text, a query already in flight, or no
        documents) are silent no-ops.

        Args:
            text: Query text, defaults to the pending input.

        Returns:
            The appended agent entry, or None if nothing was appended.
        """
        if not self.can_submit(text):
            return None

        query = (self._state.pending_input if text is None else text).strip()

        self._state.submission_in_flight = True
        self._history.append(ConversationEntry(role=Role.USER, text=query))
        self._state.pending_input = ""
        self._state.last_error = None
        generation = self._history.generation

        try:
            agent_entry = await self._ask(query)
        except SessionError as e:
            if self._history.generation != generation:
                logger.info(f"Discarding failure for a cleared conversation: {e}")
                return None
            self._state.last_error = str(e) or DEFAULT_QUERY_ERROR
            logger.warning(f"Query failed: {e}")
            return None
        finally:
            self._state.submission_in_flight = False

        if self._history.generation != generation:
            logger.info("Discarding response for a cleared conversation")
            return None

        self._history.append(agent_entry)
        return agent_entry

    async def _ask(self, query: str) -> ConversationEntry:
        logger.info(f"Querying agent {self._agent_id}: {query[:80]!r}")
        result = await self._agent.query_agent(query, self._agent_id)

        if not result.success or result.response is None or result.response == "":
            raise QueryFailed(result.error or DEFAULT_QUERY_ERROR)

        return parse_agent_response(result.response)


class SuggestionDispatcher:
    """Turns a chosen suggested question into exactly one submission."""

    def __init__(
        self,
        state: SessionState,
        controller: QuerySubmissionController,
        suggestions: tuple[str, ...] = SUGGESTED_QUESTIONS,
    ) -> None:
        self._state = state
        self._controller = controller
        self.suggestions = suggestions

    def should_offer(self) -> bool:
        """Suggestions are shown on an empty conversation once documents exist."""
        return not self._state.history and bool(self._state.documents)

    async def select(self, question: str) -> ConversationEntry | None:
        """Submit a suggested or follow-up question.

        Args:
            question: The chosen question.

        Returns:
            The appended agent entry, or None if the selection was rejected or
            the query failed. A rejected selection leaves the input untouched.
        """
        if not self._controller.can_submit(question):
            logger.debug(f"Rejected suggestion {question!r}")
            return None

        self._state.pending_input = question
        return await self._controller.submit()
