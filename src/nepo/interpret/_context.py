"""Execution context: the per-run state shared by evaluator and executor.

Holds the cooperative-cancellation flag, the flat variable table and the
record of block faults.  ``stop()`` is safe to call from another thread;
everything else is touched only by the execution thread.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel

from ._values import RuntimeValue


class RunState(str, Enum):
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


class BlockFault(BaseModel):
    """A fault caught at a block boundary."""

    block_type: str | None
    block_id: str | None = None
    error_type: str
    message: str


def _sleep_ms(milliseconds: int) -> None:
    if milliseconds > 0:
        time.sleep(milliseconds / 1000)


class ExecutionContext:
    """State for a single program run.

    Parameters
    ----------
    sleep : callable
        Blocks the execution thread for the given number of milliseconds.
        Used while a tone plays and between condition polls.  Tests pass a
        no-op.
    poll_interval_ms : int
        Interval between condition polls of wait blocks.
    max_depth : int
        Maximum statement nesting depth before a block faults.
    clock : callable
        Monotonic clock in seconds, read at construction and by the timer
        block.
    """

    def __init__(
        self,
        sleep: Callable[[int], None] = _sleep_ms,
        poll_interval_ms: int = 50,
        max_depth: int = 64,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.variables: dict[str, RuntimeValue] = {}
        self.faults: list[BlockFault] = []
        self.sleep = sleep
        self.poll_interval_ms = poll_interval_ms
        self.max_depth = max_depth
        self._stopped = threading.Event()
        self._clock = clock
        self._started = clock()

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    @property
    def state(self) -> RunState:
        return RunState.RUNNING if self.running else RunState.STOPPED

    def elapsed_ms(self) -> float:
        """Milliseconds since the run started."""
        return (self._clock() - self._started) * 1000.0

    def stop(self) -> None:
        """Request a cooperative stop.  Never undone within a run."""
        self._stopped.set()
