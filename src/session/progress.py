"""Simulated upload progress.

The upload collaborator gives no byte-level progress, so the bar is driven by
a timer while the real call is outstanding. The bar never reaches 100 before
the upload actually resolves.
"""

import asyncio
import logging
import random
from enum import Enum

from src.models.schemas import SessionState

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.2
DEFAULT_MAX_INCREMENT = 30
DEFAULT_PROGRESS_CAP = 90
DEFAULT_RESET_DELAY = 1.0


class ProgressPhase(str, Enum):
    """Simulator states."""

    IDLE = "idle"
    ADVANCING = "advancing"
    COMPLETING = "completing"


class UploadProgressSimulator:
    """Drives ``SessionState.upload_progress`` for one upload at a time.

    Attributes:
        phase: Current simulator state.
    """

    def __init__(
        self,
        state: SessionState,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        max_increment: int = DEFAULT_MAX_INCREMENT,
        cap: int = DEFAULT_PROGRESS_CAP,
        reset_delay: float = DEFAULT_RESET_DELAY,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the simulator.

        Args:
            state: Session state whose progress field is driven.
            tick_interval: Seconds between progress increments.
            max_increment: Largest single increment, in percent.
            cap: Highest value reached before the upload resolves.
            reset_delay: Seconds to hold 100% before returning to idle.
            rng: Random source, injectable for deterministic tests.
        """
        if not 0 < cap < 100:
            raise ValueError("cap must be between 1 and 99")
        if max_increment < 1:
            raise ValueError("max_increment must be at least 1")

        self._state = state
        self._tick_interval = tick_interval
        self._max_increment = max_increment
        self._cap = cap
        self._reset_delay = reset_delay
        self._rng = rng or random.Random()
        self._tick_task: asyncio.Task[None] | None = None
        self._reset_task: asyncio.Task[None] | None = None
        self.phase = ProgressPhase.IDLE

    @property
    def is_active(self) -> bool:
        """Whether a run is advancing or holding at 100%."""
        return self.phase is not ProgressPhase.IDLE

    def start(self) -> None:
        """Begin advancing progress from zero.

        Raises:
            RuntimeError: If a previous run has not returned to idle.
        """
        if self.is_active:
            raise RuntimeError(f"Upload progress already running ({self.phase.value})")

        self._state.upload_progress = 0
        self.phase = ProgressPhase.ADVANCING
        self._tick_task = asyncio.create_task(self._advance())

    def complete(self) -> None:
        """Jump to 100% and schedule the return to idle."""
        self._cancel_tick()
        self._state.upload_progress = 100
        self.phase = ProgressPhase.COMPLETING
        self._reset_task = asyncio.create_task(self._reset_after_delay())

    def fail(self) -> None:
        """Stop immediately and reset to zero, skipping the completion hold."""
        self._cancel_tick()
        self._cancel_reset()
        self._state.upload_progress = 0
        self.phase = ProgressPhase.IDLE

    async def wait_idle(self) -> None:
        """Wait for a pending completion hold to finish."""
        task = self._reset_task
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            # A fail() during the hold cancels the reset, not the waiter
            if not task.cancelled():
                raise

    async def aclose(self) -> None:
        """Cancel any running task and force the idle state."""
        tasks = [t for t in (self._tick_task, self._reset_task) if t is not None]
        self.fail()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _advance(self) -> None:
        while self._state.upload_progress < self._cap:
            await asyncio.sleep(self._tick_interval)
            step = self._rng.randint(1, self._max_increment)
            self._state.upload_progress = min(self._cap, self._state.upload_progress + step)
        logger.debug(f"Upload progress holding at {self._cap}%")

    async def _reset_after_delay(self) -> None:
        await asyncio.sleep(self._reset_delay)
        self._state.upload_progress = 0
        self.phase = ProgressPhase.IDLE
        self._reset_task = None

    def _cancel_tick(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
            self._tick_task = None

    def _cancel_reset(self) -> None:
        if self._reset_task is not None:
            self._reset_task.cancel()
            self._reset_task = None
