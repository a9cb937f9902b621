"""NEPO interpreter: executes a program tree against a brick.

Entry point::

    from nepo.hardware import RecordingHardware
    from nepo.interpret import run
    from nepo.markup import load_program

    hw = RecordingHardware()
    ctx = run(load_program("hello.xml"), hw)
    assert not ctx.faults
"""

from __future__ import annotations

import logging

from nepo.errors import MissingEntryPointError
from nepo.hardware import Hardware
from nepo.markup import read_configuration
from nepo.model.tree import ProgramTree
from nepo.settings import RunnerSettings

from ._context import BlockFault, ExecutionContext, RunState
from ._evaluator import ExpressionEvaluator
from ._executor import StatementExecutor
from ._locator import locate
from ._values import ABSENT, RuntimeValue

logger = logging.getLogger(__name__)


def run(
    tree: ProgramTree,
    hardware: Hardware,
    *,
    context: ExecutionContext | None = None,
    settings: RunnerSettings | None = None,
) -> ExecutionContext:
    """Run the program in *tree* to completion or cancellation.

    Parameters
    ----------
    tree
        The parsed program.
    hardware
        Brick to drive.
    context
        Pre-built context, e.g. one another thread may ``stop()``.
        Created from *settings* when omitted.
    settings
        Polling interval and nesting limit for a fresh context.

    Returns
    -------
    ExecutionContext
        The context after the run, in the STOPPED state, with any block
        faults recorded.

    Raises
    ------
    MissingEntryPointError
        If the program has no start block.
    """
    start = locate(tree)
    if start is None:
        raise MissingEntryPointError("Program has no robControls_start block")

    if context is None:
        settings = settings or RunnerSettings()
        context = ExecutionContext(
            poll_interval_ms=settings.poll_interval_ms,
            max_depth=settings.max_depth,
        )

    executor = StatementExecutor(
        hardware,
        context,
        configuration=read_configuration(tree),
    )
    logger.info("Program started")
    try:
        executor.run(start)
    finally:
        cancelled = not context.running
        context.stop()
    logger.info(
        "Program %s with %d fault(s)",
        "cancelled" if cancelled else "finished",
        len(context.faults),
    )
    return context


__all__ = [
    "ABSENT",
    "BlockFault",
    "ExecutionContext",
    "ExpressionEvaluator",
    "RunState",
    "RuntimeValue",
    "StatementExecutor",
    "locate",
    "run",
]
