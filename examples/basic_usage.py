#!/usr/bin/env python3
"""
Basic Usage - Stateful Worker

Runs the worker for a few cycles with a toggle that flips every second and
a one-second job, then stops it and prints the transitions it made.

Run: python examples/basic_usage.py
"""

import time
from datetime import datetime

from stateful_worker.config.defaults import LoggingParams, WorkerConfig, WorkerParams
from stateful_worker.jobs import CallableJob
from stateful_worker.logging import configure_logging
from stateful_worker.toggles import ToggleSource
from stateful_worker.worker import WorkerService


class SecondParityToggle(ToggleSource):
    """Like the minute-parity toggle, but flips every second."""

    def unset(self) -> bool:
        return datetime.now().second % 2 == 0

    def set(self) -> bool:
        return datetime.now().second % 2 == 1


def report(cancel) -> None:
    print(f"  ⚙️  job ran at {datetime.now():%H:%M:%S}")
    time.sleep(1)


def main():
    config = WorkerConfig(
        worker=WorkerParams(poll_interval_seconds=0.25, job_duration_seconds=1.0),
        logging=LoggingParams(level="INFO"),
    )
    configure_logging(level=config.logging.level)

    worker = WorkerService(config, toggle=SecondParityToggle(), job=CallableJob(report, name="report"))
    print("🚀 Starting worker for 8 seconds...")
    worker.start()
    time.sleep(8)
    worker.stop()

    print("\n📊 TRANSITIONS")
    print("=" * 50)
    for record in worker.history:
        print(f"  {record.timestamp:%H:%M:%S.%f} {record.source.value:>18} "
              f"--{record.trigger.value}--> {record.destination.value}")
    print(f"\nFinal state: {worker.state.value}, jobs run: {worker.handlers.jobs_started}")


if __name__ == "__main__":
    main()
