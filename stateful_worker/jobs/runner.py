"""
Job runners for the Running phase.

A job performs one unit of recurring work and returns nothing. Jobs are
handed the worker's cancellation signal but the Running phase does not
wait on it; how a job reacts to shutdown is up to the job.
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..logging.config import get_logger
from ..state.models import CancellationSignal

logger = get_logger(__name__)


class Job(ABC):
    """Base class for recurring jobs."""

    name: str = "job"

    @abstractmethod
    def run(self, cancel: CancellationSignal) -> None:
        """
        Execute one unit of work to completion.

        Args:
            cancel: Worker cancellation signal, read-only
        """
        pass


class DelayJob(Job):
    """Stand-in job that blocks for a fixed duration."""

    name = "delay"

    def __init__(self, duration_seconds: float = 5.0,
                 sleep: Optional[Callable[[float], None]] = None) -> None:
        self.duration_seconds = duration_seconds
        self._sleep = sleep or time.sleep

    def run(self, cancel: CancellationSignal) -> None:
        logger.debug("Running delay job", duration_seconds=self.duration_seconds)
        self._sleep(self.duration_seconds)


class CallableJob(Job):
    """Adapts a plain callable taking the cancellation signal into a Job."""

    def __init__(self, func: Callable[[CancellationSignal], None],
                 name: Optional[str] = None) -> None:
        self.func = func
        self.name = name or getattr(func, "__name__", "callable")

    def run(self, cancel: CancellationSignal) -> None:
        self.func(cancel)
