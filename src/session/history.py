"""Append-only conversation log."""

import logging
from collections.abc import Iterator

from src.models.schemas import ConversationEntry, SessionState

logger = logging.getLogger(__name__)


class ChatHistory:
    """Ordered log of conversation entries backed by ``SessionState.history``.

    Entries are only ever appended; display order is insertion order.
    ``generation`` increases on every clear so that a response resolving
    after a clear can tell that the log it was meant for is gone.
    """

    def __init__(self, state: SessionState) -> None:
        self._state = state
        self.generation = 0

    def append(self, entry: ConversationEntry) -> None:
        self._state.history.append(entry)

    def clear(self) -> None:
        """Empty the log and dismiss the current error. Documents are untouched."""
        dropped = len(self._state.history)
        self._state.history.clear()
        self._state.last_error = None
        self.generation += 1
        logger.info(f"Cleared chat history ({dropped} entries)")

    def invalidate(self) -> None:
        """Mark responses still in flight as stale without touching the log."""
        self.generation += 1

    @property
    def entries(self) -> list[ConversationEntry]:
        """Snapshot of the log in display order."""
        return list(self._state.history)

    def __iter__(self) -> Iterator[ConversationEntry]:
        return iter(list(self._state.history))

    def __len__(self) -> int:
        return len(self._state.history)

    def __getitem__(self, index: int) -> ConversationEntry:
        return self._state.history[index]
