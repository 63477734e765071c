"""
Worker failure classifications.

InvalidTransitionError is reported and leaves the machine untouched,
JobExecutionError lets the cycle continue, and configuration errors stop
the worker before it starts.
"""

from typing import Optional, Dict, Any

from .recovery import GracefulDegradationError, UnrecoverableError


class WorkerError(Exception):
    """Base class for stateful worker errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StateMachineError(WorkerError):
    """Base class for phase state machine errors."""


class InvalidTransitionError(StateMachineError):
    """Trigger fired that is not permitted from the current state."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 trigger: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.trigger = trigger
        # state is left unchanged, the machine stays usable
        self.recoverable = True


class MachineConfigurationError(StateMachineError, UnrecoverableError):
    """State graph configured incompletely or inconsistently."""

    def __init__(self, message: str, state: Optional[str] = None, **kwargs):
        WorkerError.__init__(self, message, **kwargs)
        self.state = state
        self.recoverable = False


class JobExecutionError(WorkerError, GracefulDegradationError):
    """Recurring job raised while running; the cycle continues."""

    def __init__(self, message: str, job_name: Optional[str] = None,
                 cause: Optional[BaseException] = None, **kwargs):
        WorkerError.__init__(self, message, **kwargs)
        self.job_name = job_name
        self.cause = cause
        self.degraded_functionality = "job_run"
        self.fallback_strategy = "continue_cycle"
        self.allows_degradation = True


class ToggleSourceError(WorkerError):
    """Toggle source failed to evaluate a condition."""

    def __init__(self, message: str, condition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.condition = condition


class ConfigurationError(WorkerError, UnrecoverableError):
    """Worker configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        WorkerError.__init__(self, message, **kwargs)
        self.errors = errors or []
        self.recoverable = False
