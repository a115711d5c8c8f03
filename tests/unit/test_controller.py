"""Unit tests for QuerySubmissionController and SuggestionDispatcher."""

import asyncio

import pytest
import pytest_check as check

from src.models.schemas import Document, QueryResult, Role, SessionState
from src.session.controller import (
    SUGGESTED_QUESTIONS,
    QuerySubmissionController,
    SubmissionPhase,
    SuggestionDispatcher,
)
from src.session.errors import MalformedResponse, QueryFailed
from src.session.history import ChatHistory
from tests.conftest import FakeAgent


@pytest.fixture
def history(state: SessionState) -> ChatHistory:
    return ChatHistory(state)


@pytest.fixture
def controller(
    state: SessionState, history: ChatHistory, agent: FakeAgent
) -> QuerySubmissionController:
    state.documents.append(Document(name="manual.pdf", size_bytes=2048))
    return QuerySubmissionController(state, history, agent, agent_id="agent-test")


@pytest.fixture
def dispatcher(state: SessionState, controller: QuerySubmissionController) -> SuggestionDispatcher:
    return SuggestionDispatcher(state, controller)


class TestSubmitPreconditions:
    """Tests for submissions that must not leave the idle state."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_input_is_noop(
        self,
        controller: QuerySubmissionController,
        state: SessionState,
        agent: FakeAgent,
        text: str,
    ) -> None:
        """Blank or whitespace-only input changes nothing."""
        state.pending_input = text
        state.last_error = "previous"

        assert await controller.submit() is None

        check.equal(state.history, [])
        check.equal(state.last_error, "previous")
        check.equal(agent.calls, [])

    async def test_no_documents_is_noop(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """Submission is disabled while no documents are loaded."""
        state.documents.clear()

        assert await controller.submit("What is this about?") is None
        assert state.history == []
        assert agent.calls == []

    async def test_concurrent_submission_rejected(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """A second submission while one is in flight adds no user entry."""
        agent.gate = asyncio.Event()
        first = asyncio.create_task(controller.submit("first"))
        await asyncio.sleep(0)
        check.equal(controller.phase, SubmissionPhase.SUBMITTING)

        second = await controller.submit("second")

        check.is_none(second)
        check.equal([e.text for e in state.history], ["first"])
        agent.gate.set()
        await first
        check.equal(len(agent.calls), 1)
        check.equal([e.role for e in state.history], [Role.USER, Role.AGENT])


class TestSubmitLifecycle:
    """Tests for the submitting state and its outcomes."""

    async def test_entering_submitting_updates_state(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """The user entry is appended and input/error cleared before the call resolves."""
        agent.gate = asyncio.Event()
        state.pending_input = "  What is this about?  "
        state.last_error = "old error"

        task = asyncio.create_task(controller.submit())
        await asyncio.sleep(0)

        check.is_true(state.submission_in_flight)
        check.equal(state.pending_input, "")
        check.is_none(state.last_error)
        check.equal(len(state.history), 1)
        check.equal(state.history[0].text, "What is this about?")
        check.equal(state.history[0].role, Role.USER)

        agent.gate.set()
        await task
        check.is_false(state.submission_in_flight)

    async def test_success_appends_agent_entry(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """A successful call appends the parsed answer after the question."""
        entry = await controller.submit("What is this about?")

        check.is_not_none(entry)
        check.equal([e.role for e in state.history], [Role.USER, Role.AGENT])
        check.equal(state.history[1].text, "It is about testing.")
        check.equal(agent.calls, [("What is this about?", "agent-test")])
        check.equal(controller.phase, SubmissionPhase.IDLE)

    async def test_logical_failure_sets_error(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """success=False records the collaborator's message and appends nothing."""
        agent.result = QueryResult(success=False, error="Agent unavailable")

        assert await controller.submit("q") is None

        check.equal(len(state.history), 1)
        check.equal(state.last_error, "Agent unavailable")
        check.is_false(state.submission_in_flight)

    async def test_missing_response_uses_default_error(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """A success flag without a response counts as a failure."""
        agent.result = QueryResult(success=True, response=None)

        await controller.submit("q")

        assert state.last_error == "Failed to get response"
        assert len(state.history) == 1

    @pytest.mark.parametrize(
        "error", [QueryFailed("Connection failed: timeout"), MalformedResponse("Bad payload")]
    )
    async def test_raised_errors_are_recovered(
        self,
        controller: QuerySubmissionController,
        state: SessionState,
        agent: FakeAgent,
        error: Exception,
    ) -> None:
        """Transport and parse failures become last_error."""
        agent.error = error

        await controller.submit("q")

        check.equal(state.last_error, str(error))
        check.equal(len(state.history), 1)

    async def test_unparseable_payload_sets_error(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """A payload that is neither object nor string is a malformed response."""
        agent.result = QueryResult(success=True, response=[1, 2, 3])

        await controller.submit("q")

        assert state.last_error is not None
        assert len(state.history) == 1

    async def test_retry_after_failure(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """The user may retry immediately; one call per attempt."""
        agent.result = QueryResult(success=False, error="busy")
        await controller.submit("q")
        agent.result = QueryResult(success=True, response="Answer")

        await controller.submit("q")

        check.equal(len(agent.calls), 2)
        check.is_none(state.last_error)
        check.equal([e.text for e in state.history], ["q", "q", "Answer"])


class TestStaleResponses:
    """Tests for responses arriving after the chat was cleared."""

    async def test_response_after_clear_is_discarded(
        self,
        controller: QuerySubmissionController,
        state: SessionState,
        history: ChatHistory,
        agent: FakeAgent,
    ) -> None:
        """A late answer does not reappear in a cleared conversation."""
        agent.gate = asyncio.Event()
        task = asyncio.create_task(controller.submit("q"))
        await asyncio.sleep(0)

        history.clear()
        check.is_true(state.submission_in_flight)
        agent.gate.set()

        check.is_none(await task)
        check.equal(state.history, [])
        check.is_false(state.submission_in_flight)

    async def test_failure_after_clear_is_discarded(
        self,
        controller: QuerySubmissionController,
        state: SessionState,
        history: ChatHistory,
        agent: FakeAgent,
    ) -> None:
        """A late failure does not set an error on a cleared conversation."""
        agent.gate = asyncio.Event()
        agent.error = QueryFailed("late")
        task = asyncio.create_task(controller.submit("q"))
        await asyncio.sleep(0)

        history.clear()
        agent.gate.set()
        await task

        assert state.last_error is None

    async def test_cancelled_submission_returns_to_idle(
        self, controller: QuerySubmissionController, state: SessionState, agent: FakeAgent
    ) -> None:
        """Cancelling the awaiting task leaves no agent entry and no in-flight flag."""
        agent.gate = asyncio.Event()
        task = asyncio.create_task(controller.submit("q"))
        await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        check.equal(controller.phase, SubmissionPhase.IDLE)
        check.equal([e.role for e in state.history], [Role.USER])


class TestSuggestionDispatcher:
    """Tests for suggested and follow-up question dispatch."""

    async def test_select_submits_exactly_once(
        self, dispatcher: SuggestionDispatcher, state: SessionState, agent: FakeAgent
    ) -> None:
        """Selecting a question produces one submission of that question."""
        question = SUGGESTED_QUESTIONS[1]

        entry = await dispatcher.select(question)

        check.is_not_none(entry)
        check.equal(agent.calls, [(question, "agent-test")])
        check.equal([e.text for e in state.history][0], question)
        check.equal(state.pending_input, "")

    async def test_select_without_documents_is_rejected(
        self, dispatcher: SuggestionDispatcher, state: SessionState, agent: FakeAgent
    ) -> None:
        """With zero documents a selection produces no entries."""
        state.documents.clear()

        assert await dispatcher.select(SUGGESTED_QUESTIONS[0]) is None

        check.equal(state.history, [])
        check.equal(state.pending_input, "")
        check.equal(agent.calls, [])

    async def test_select_while_submitting_is_rejected(
        self, dispatcher: SuggestionDispatcher, state: SessionState, agent: FakeAgent
    ) -> None:
        """A selection during an in-flight query is ignored."""
        agent.gate = asyncio.Event()
        first = asyncio.create_task(dispatcher.select("first"))
        await asyncio.sleep(0)

        assert await dispatcher.select("second") is None

        agent.gate.set()
        await first
        assert agent.calls == [("first", "agent-test")]

    def test_should_offer(self, dispatcher: SuggestionDispatcher, state: SessionState) -> None:
        """Suggestions show on an empty conversation with documents loaded."""
        check.is_true(dispatcher.should_offer())
        state.documents.clear()
        check.is_false(dispatcher.should_offer())

    def test_default_suggestions(self, dispatcher: SuggestionDispatcher) -> None:
        assert dispatcher.suggestions == SUGGESTED_QUESTIONS
        assert len(SUGGESTED_QUESTIONS) == 4
