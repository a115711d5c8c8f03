"""Mapping from an untrusted answering-service payload to a conversation entry.

Expected payload shape::

    {"result": {"answer": str, "sources": [...], "confidence": float,
                "related_topics": [str], "follow_up_questions": [str]}}

Every field is optional. A bare string payload is taken as the answer text.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from src.models.schemas import ConversationEntry, Evidence, Role
from src.session.errors import MalformedResponse

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = "No response received"


def _extract_evidence(sources: Any) -> list[Evidence]:
    """Validate source items, skipping the ones that do not fit."""
    if sources is None:
        return []
    if not isinstance(sources, list):
        logger.warning(f"Ignoring non-list sources of type {type(sources).__name__}")
        return []

    evidence: list[Evidence] = []
    for i, item in enumerate(sources):
        try:
            evidence.append(Evidence.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed source {i + 1}: {e.error_count()} error(s)")
            continue
    return evidence


def _extract_confidence(value: Any) -> float | None:
    # bool is an int subclass but never a meaningful confidence
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    logger.warning(f"Ignoring non-numeric confidence: {value!r}")
    return None


def _extract_strings(value: Any, field: str) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        logger.warning(f"Ignoring non-list {field}")
        return None
    return [item for item in value if isinstance(item, str)]


def parse_agent_response(raw: Any) -> ConversationEntry:
    """Build an agent conversation entry from a raw response payload.

    Args:
        raw: The ``response`` field returned by the answering collaborator.

    Returns:
        Agent ConversationEntry with answer text, evidence and metadata.

    Raises:
        MalformedResponse: If the payload is neither a mapping nor a string.
    """
    if isinstance(raw, str):
        return ConversationEntry(role=Role.AGENT, text=raw)

    if not isinstance(raw, Mapping):
        raise MalformedResponse(
            f"Unexpected response format from the answering service ({type(raw).__name__})"
        )

    result = raw.get("result")
    if not isinstance(result, Mapping):
        result = {}

    answer = result.get("answer")
    text = answer if isinstance(answer, str) and answer else FALLBACK_ANSWER

    return ConversationEntry(
        role=Role.AGENT,
        text=text,
        evidence=_extract_evidence(result.get("sources")),
        confidence=_extract_confidence(result.get("confidence")),
        related_topics=_extract_strings(result.get("related_topics"), "related_topics"),
        follow_ups=_extract_strings(result.get("follow_up_questions"), "follow_up_questions"),
    )
