"""
Error classification for the stateful worker.

Errors are split by origin (state machine, job, toggle source,
configuration) and tagged with a recovery category so callers can decide
whether to park the machine, continue the cycle or stop the process.
"""

from .system_failures import (
    WorkerError,
    StateMachineError,
    InvalidTransitionError,
    MachineConfigurationError,
    JobExecutionError,
    ToggleSourceError,
    ConfigurationError,
)
from .recovery import (
    UnrecoverableError,
    GracefulDegradationError,
)

__all__ = [
    # Worker failures
    "WorkerError",
    "StateMachineError",
    "InvalidTransitionError",
    "MachineConfigurationError",
    "JobExecutionError",
    "ToggleSourceError",
    "ConfigurationError",
    # Recovery Categories
    "UnrecoverableError",
    "GracefulDegradationError",
]
