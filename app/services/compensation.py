"""
Best-effort compensation for multi-store writes.

The asset, policy and contract definition stores do not share a
transaction. A multi-store write is therefore expressed as an ordered list
of `Step` objects, each pairing a forward action with the reverse action
that undoes it. `run_with_compensation` executes the forward actions in
order; when one fails, it runs the reverse actions of every step attempted
so far, including the failing one, and re-raises the original error.

This is weaker than atomicity. If a reverse action fails too, the failure
is logged and swallowed and the entity it should have removed stays in its
store. Reverse actions are expected to be idempotent deletes on distinct
ids, so they are run in reverse order but any order would do.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, List

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Step:
    """
    One forward action and its reverse action.

    Attributes:
        name (str): Label used in logs and error messages (e.g. ``asset``).
        do (Callable): Coroutine function performing the write.
        undo (Callable): Coroutine function reverting the write. Must not
            fail when there is nothing to revert.
    """

    name: str
    do: Callable[[], Awaitable[None]]
    undo: Callable[[], Awaitable[None]]


class StepFailed(Exception):
    """
    Raised by `run_with_compensation` once compensation has run.

    The original exception is kept as ``cause`` and ``__cause__``.
    """

    def __init__(self, step: str, cause: Exception):
        super().__init__(f"step '{step}' failed: {cause}")
        self.step = step
        self.cause = cause


async def run_with_compensation(steps: List[Step]) -> None:
    """
    Runs ``steps`` in order, compensating on the first failure.

    Args:
        steps (List[Step]): Steps in execution order.

    Raises:
        StepFailed: If a forward action raised. Raised only after the
            reverse action of every attempted step has been tried.
    """

    attempted: List[Step] = []
    for step in steps:
        attempted.append(step)
        try:
            await step.do()
        except Exception as e:
            logger.warning("compensation.triggered", step=step.name, error=str(e))
            await _compensate(attempted)
            raise StepFailed(step.name, e) from e


async def _compensate(attempted: List[Step]) -> None:
    for step in reversed(attempted):
        try:
            await step.undo()
        except Exception as e:
            # must not replace the error that triggered compensation
            logger.error("compensation.failed", step=step.name, error=str(e), exc_info=True)
        else:
            logger.info("compensation.reverted", step=step.name)
