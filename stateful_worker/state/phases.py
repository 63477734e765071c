"""
Phase entry handlers.

One handler per state. Each runs to completion on the dispatch thread and
returns the trigger to fire next, or None when cancellation was observed
and the machine should park in its current phase.
"""

from typing import Callable, Optional

from ..errors import JobExecutionError, ToggleSourceError
from ..jobs.runner import Job
from ..logging.config import get_gating_logger, get_state_logger, log_phase_entry, log_poll_tick
from ..toggles.base import ConditionResult, ToggleSource, resolve_condition
from .machine import StateMachine
from .models import CancellationSignal, EntryAction, State, Trigger

state_logger = get_state_logger(__name__)
gating_logger = get_gating_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 15.0


class PhaseHandlers:
    """Entry behaviour for every worker phase."""

    def __init__(
        self,
        machine: StateMachine,
        toggle: ToggleSource,
        job: Job,
        cancel: CancellationSignal,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.machine = machine
        self.toggle = toggle
        self.job = job
        self.cancel = cancel
        self.poll_interval_seconds = poll_interval_seconds
        self.logger = state_logger
        self.gating_logger = gating_logger

        self.jobs_started = 0
        self.job_failures = 0
        self.last_job_error: Optional[JobExecutionError] = None

    def entry_actions(self) -> dict[State, EntryAction]:
        """Entry action for each state, ready for StateMachine.configure."""
        return {
            State.STARTUP: self.start,
            State.WAITING_FOR_RESET: self.wait_for_reset,
            State.WAITING_TO_RUN: self.wait_to_run,
            State.RUNNING: self.run_job,
        }

    def start(self) -> Optional[Trigger]:
        log_phase_entry(self.logger, state=self.machine.state.value, handler="start")

        if self.cancel.is_set():
            self.logger.info("Cancellation requested before start", state=self.machine.state.value)
            return None
        return Trigger.START

    def wait_for_reset(self) -> Optional[Trigger]:
        """Poll until the toggle reads unset."""
        log_phase_entry(self.logger, state=self.machine.state.value, handler="wait_for_reset")
        return self._poll("unset", self.toggle.unset, Trigger.RESET)

    def wait_to_run(self) -> Optional[Trigger]:
        """Poll until the toggle reads set."""
        log_phase_entry(self.logger, state=self.machine.state.value, handler="wait_to_run")
        return self._poll("set", self.toggle.set, Trigger.SET)

    def run_job(self) -> Trigger:
        """
        Run the job once and always finish the cycle.

        Cancellation is not consulted here; a job in progress completes
        before the worker can park. Job failures are logged and counted and
        the cycle continues with JobFinished.
        """
        log_phase_entry(self.logger, state=self.machine.state.value, handler="run_job")
        self.jobs_started += 1

        try:
            self.job.run(self.cancel)
        except Exception as exc:
            self.job_failures += 1
            self.last_job_error = JobExecutionError(
                f"Job {self.job.name} failed: {exc}",
                job_name=self.job.name,
                cause=exc,
                context={"run": self.jobs_started},
            )
            self.logger.error(
                "Job failed, continuing cycle",
                state=self.machine.state.value,
                job=self.job.name,
                run=self.jobs_started,
                failures=self.job_failures,
                exc_info=exc,
            )
        else:
            self.logger.info(
                "Job completed",
                state=self.machine.state.value,
                job=self.job.name,
                run=self.jobs_started,
            )

        return Trigger.JOB_FINISHED

    def _poll(
        self,
        condition: str,
        check: Callable[[], ConditionResult],
        trigger: Trigger,
    ) -> Optional[Trigger]:
        iteration = 0
        while not self.cancel.is_set():
            iteration += 1
            try:
                result = resolve_condition(check())
            except Exception as exc:
                raise ToggleSourceError(
                    f"Toggle condition {condition} could not be evaluated: {exc}",
                    condition=condition,
                    context={"state": self.machine.state.value, "iteration": iteration},
                ) from exc

            log_poll_tick(
                self.gating_logger,
                state=self.machine.state.value,
                condition=condition,
                result=result,
                iteration=iteration,
            )

            if result:
                return trigger

            self.gating_logger.debug(
                "Sleeping until next poll",
                state=self.machine.state.value,
                poll_interval_seconds=self.poll_interval_seconds,
            )
            self.cancel.wait(self.poll_interval_seconds)

        self.logger.info(
            "Cancellation observed, parking",
            state=self.machine.state.value,
            condition=condition,
            iterations=iteration,
        )
        return None
