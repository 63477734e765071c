"""
Phase state machine data models.

This module defines the closed set of worker phases and triggers, the fixed
transition table linking them, and immutable records of applied transitions.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Protocol

from ..utils.time import format_wall_time


class State(str, Enum):
    """Worker phases."""
    STARTUP = "startup"
    WAITING_FOR_RESET = "waiting_for_reset"
    WAITING_TO_RUN = "waiting_to_run"
    RUNNING = "running"


class Trigger(str, Enum):
    """Named requests to move between phases."""
    START = "start"
    RESET = "reset"
    SET = "set"
    JOB_FINISHED = "job_finished"


INITIAL_STATE = State.STARTUP

# Linear cycle; Startup is only ever visited once.
TRANSITIONS: Mapping[State, Mapping[Trigger, State]] = MappingProxyType({
    State.STARTUP: MappingProxyType({Trigger.START: State.WAITING_FOR_RESET}),
    State.WAITING_FOR_RESET: MappingProxyType({Trigger.RESET: State.WAITING_TO_RUN}),
    State.WAITING_TO_RUN: MappingProxyType({Trigger.SET: State.RUNNING}),
    State.RUNNING: MappingProxyType({Trigger.JOB_FINISHED: State.WAITING_FOR_RESET}),
})


class CancellationSignal(Protocol):
    """Read-only view of the worker's shutdown signal (a threading.Event)."""

    def is_set(self) -> bool:
        ...

    def wait(self, timeout: Optional[float] = None) -> bool:
        ...


# Entry behaviour for a phase: runs to completion and returns the trigger to
# fire next, or None to leave the machine parked in that phase.
EntryAction = Callable[[], Optional[Trigger]]


@dataclass(frozen=True)
class TransitionRecord:
    """One applied transition."""

    source: State
    trigger: Trigger
    destination: State
    timestamp: datetime

    def as_dict(self) -> dict:
        return {
            "source": self.source.value,
            "trigger": self.trigger.value,
            "destination": self.destination.value,
            "timestamp": format_wall_time(self.timestamp),
        }
