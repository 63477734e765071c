"""
Worker service.

Wires the phase state machine to its handlers, the toggle source and the
job, and owns the dispatch thread and the cancellation signal.
"""

import threading
from typing import Any, Optional

import structlog

from .config.defaults import WorkerConfig, WorkerParams, get_default_config
from .jobs.runner import DelayJob, Job
from .state.machine import StateMachine, configure_from_table
from .state.models import TRANSITIONS, State, TransitionRecord
from .state.phases import PhaseHandlers
from .toggles.base import ToggleSource
from .toggles.time_gate import MinuteParityToggle
from .utils.time import get_clock

logger = structlog.get_logger(__name__)


class WorkerService:
    """
    Background worker cycling through the phase state machine.

    Lifecycle:
        start() activates the machine and starts the dispatch thread.
        stop() requests cancellation and waits for the machine to park.
    """

    def __init__(
        self,
        config: Optional[WorkerConfig] = None,
        toggle: Optional[ToggleSource] = None,
        job: Optional[Job] = None,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        self.logger = logger
        self.config = config or get_default_config()
        params: WorkerParams = self.config.worker

        self.cancel = cancel or threading.Event()
        self.toggle = toggle or MinuteParityToggle(get_clock(params.clock_timezone))
        self.job = job or DelayJob(params.job_duration_seconds)

        self.logger.debug("Configuring state machine")
        self.machine = StateMachine(history_size=params.history_size)
        self.handlers = PhaseHandlers(
            machine=self.machine,
            toggle=self.toggle,
            job=self.job,
            cancel=self.cancel,
            poll_interval_seconds=params.poll_interval_seconds,
        )
        configure_from_table(self.machine, self.handlers.entry_actions(), TRANSITIONS)
        self.logger.debug("State machine configured")

        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Activate the machine and start dispatching on a background thread."""
        if self._thread is not None:
            raise RuntimeError("Worker already started")

        self.logger.debug("Activating state machine")
        self.machine.activate()

        self._thread = threading.Thread(
            target=self.machine.run,
            name="stateful-worker-dispatch",
            daemon=True,
        )
        self._thread.start()
        self.logger.info("Worker started", state=self.machine.state.value)

    def run(self) -> None:
        """Activate the machine and dispatch on the calling thread until it parks."""
        self.machine.activate()
        self.machine.run()

    def request_stop(self) -> None:
        """Set the cancellation signal; it is never cleared."""
        if not self.cancel.is_set():
            self.logger.info("Cancellation requested", state=self.machine.state.value)
        self.cancel.set()

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Request cancellation and wait for the dispatch thread to exit.

        Args:
            timeout: Seconds to wait, defaults to the configured shutdown timeout

        Returns:
            True if the machine parked within the timeout
        """
        self.request_stop()
        if self._thread is None:
            return True

        if timeout is None:
            timeout = self.config.worker.shutdown_timeout_seconds
        self._thread.join(timeout)

        stopped = not self._thread.is_alive()
        if stopped:
            self.logger.info("Worker stopped", state=self.machine.state.value)
        else:
            self.logger.warning(
                "Worker did not stop within timeout",
                state=self.machine.state.value,
                timeout_seconds=timeout,
            )
        return stopped

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the dispatch thread to exit."""
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def state(self) -> State:
        return self.machine.state

    @property
    def history(self) -> list[TransitionRecord]:
        return self.machine.history

    @property
    def faulted(self) -> bool:
        return self.machine.fault is not None

    def get_status(self) -> dict[str, Any]:
        """Snapshot of the worker for logging and health checks."""
        return {
            "state": self.machine.state.value,
            "activated": self.machine.is_activated,
            "parked": self.machine.is_parked,
            "cancel_requested": self.cancel.is_set(),
            "jobs_started": self.handlers.jobs_started,
            "job_failures": self.handlers.job_failures,
            "last_job_error": (
                str(self.handlers.last_job_error) if self.handlers.last_job_error else None
            ),
            "fault": str(self.machine.fault) if self.machine.fault else None,
            "transitions": [record.as_dict() for record in self.machine.history[-10:]],
        }
