"""Base class for toggle sources."""

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Union

ConditionResult = Union[bool, Awaitable[bool]]


class ToggleSource(ABC):
    """
    Query-style source of the two gating conditions.

    Implementations must be side-effect free; each method is called at
    most once per poll interval. Either method may return an awaitable,
    which is resolved on the dispatch thread.
    """

    @abstractmethod
    def unset(self) -> ConditionResult:
        """True when the toggle is off and the cycle may reset."""
        pass

    @abstractmethod
    def set(self) -> ConditionResult:
        """True when the toggle is on and the job may run."""
        pass


async def _await_condition(pending: Awaitable[Any]) -> Any:
    return await pending


def resolve_condition(result: ConditionResult) -> bool:
    """
    Reduce a toggle result to a plain bool.

    Awaitables are run to completion on a fresh event loop; the dispatch
    thread never has a loop of its own.
    """
    if inspect.isawaitable(result):
        result = asyncio.run(_await_condition(result))
    return bool(result)
