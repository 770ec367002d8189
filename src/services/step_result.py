"""Step results threaded through the checkout orchestrator.

A step either succeeds (Ok), fails after the order header was committed
(Degraded, logged and reported but not fatal), or fails in a way that
aborts the checkout (Fatal).
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Generic, TypeVar, Union

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful step carrying its value."""

    value: T


@dataclass(frozen=True)
class Degraded:
    """A best-effort step failed; the checkout still succeeds."""

    step: str
    error: str


@dataclass(frozen=True)
class Fatal:
    """A step failed and the checkout must stop."""

    step: str
    error: str


StepResult = Union[Ok[T], Degraded, Fatal]


async def run_degradable(step: str, order_number: str, operation: Awaitable[T]) -> Union[Ok[T], Degraded]:
    """Await a best-effort step, turning any exception into Degraded.

    The failure is logged with the order number and step name so the
    order can be reconciled by hand.
    """
    try:
        value = await operation
    except Exception as e:
        logger.error(
            "Checkout step %s failed for order %s: %s",
            step,
            order_number,
            str(e),
            extra={"order_number": order_number, "step": step},
        )
        return Degraded(step=step, error=str(e))
    return Ok(value)
