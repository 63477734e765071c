"""Pytest configuration and shared fixtures."""

import threading
from datetime import datetime
from typing import Callable, Iterable, Optional

import pytest

from stateful_worker.config.defaults import LoggingParams, WorkerConfig, WorkerParams
from stateful_worker.jobs.runner import Job
from stateful_worker.toggles.base import ToggleSource


class ScriptedToggle(ToggleSource):
    """Toggle whose readings are taken from fixed sequences, then a default."""

    def __init__(self, unset_values: Iterable[bool] = (), set_values: Iterable[bool] = (),
                 default: bool = True) -> None:
        self._unset = list(unset_values)
        self._set = list(set_values)
        self.default = default
        self.unset_calls = 0
        self.set_calls = 0

    def unset(self) -> bool:
        self.unset_calls += 1
        return self._unset.pop(0) if self._unset else self.default

    def set(self) -> bool:
        self.set_calls += 1
        return self._set.pop(0) if self._set else self.default


class RecordingJob(Job):
    """Job that counts runs and optionally runs a hook or raises."""

    name = "recording"

    def __init__(self, on_run: Optional[Callable[[int, threading.Event], None]] = None,
                 error: Optional[Exception] = None) -> None:
        self.on_run = on_run
        self.error = error
        self.runs = 0

    def run(self, cancel) -> None:
        self.runs += 1
        if self.on_run is not None:
            self.on_run(self.runs, cancel)
        if self.error is not None:
            raise self.error


@pytest.fixture
def cancel_event() -> threading.Event:
    return threading.Event()


@pytest.fixture
def scripted_toggle() -> ScriptedToggle:
    return ScriptedToggle()


@pytest.fixture
def recording_job() -> RecordingJob:
    return RecordingJob()


@pytest.fixture
def fast_config() -> WorkerConfig:
    """Configuration with no waits, for driving full cycles in tests."""
    return WorkerConfig(
        worker=WorkerParams(
            poll_interval_seconds=0.0,
            job_duration_seconds=0.0,
            history_size=50,
            shutdown_timeout_seconds=5.0,
        ),
        logging=LoggingParams(level="DEBUG"),
    )


@pytest.fixture
def even_minute() -> datetime:
    return datetime(2024, 1, 1, 12, 10, 30)


@pytest.fixture
def odd_minute() -> datetime:
    return datetime(2024, 1, 1, 12, 11, 30)
