"""Session state machine for document-grounded question answering.

Responsibilities:
    - Document working set with single-flight uploads
    - Simulated upload progress bounded below 100% until the upload resolves
    - Single-flight query submission and response parsing
    - Append-only conversation history
    - Direct dispatch of suggested and follow-up questions

All state lives in one explicit ``KnowledgeSession`` per open window.
"""

from src.session.controller import (
    SUGGESTED_QUESTIONS,
    QuerySubmissionController,
    SubmissionPhase,
    SuggestionDispatcher,
)
from src.session.errors import MalformedResponse, QueryFailed, SessionError, UploadFailed
from src.session.history import ChatHistory
from src.session.progress import ProgressPhase, UploadProgressSimulator
from src.session.registry import DocumentRegistry
from src.session.response import FALLBACK_ANSWER, parse_agent_response
from src.session.session import KnowledgeSession

__all__ = [
    "FALLBACK_ANSWER",
    "SUGGESTED_QUESTIONS",
    "ChatHistory",
    "DocumentRegistry",
    "KnowledgeSession",
    "MalformedResponse",
    "ProgressPhase",
    "QueryFailed",
    "QuerySubmissionController",
    "SessionError",
    "SubmissionPhase",
    "SuggestionDispatcher",
    "UploadFailed",
    "UploadProgressSimulator",
    "parse_agent_response",
]
