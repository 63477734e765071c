"""
Process host for the stateful worker.

Configures logging, loads configuration, translates SIGINT/SIGTERM into the
worker's cancellation signal and maps the outcome to a process exit code.
"""

import argparse
import signal
import threading
from pathlib import Path
from typing import Any, Optional, Sequence

import structlog

from .config.loader import ConfigLoader
from .errors import ConfigurationError, MachineConfigurationError
from .logging.config import configure_logging
from .worker import WorkerService

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stateful-worker",
        description="Run the toggle-gated recurring job worker",
    )
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory containing worker.yaml")
    parser.add_argument("--log-level", default=None,
                        help="Override logging level (DEBUG, INFO, ...)")
    parser.add_argument("--json-logs", action="store_true", default=None,
                        help="Emit JSON log lines")
    parser.add_argument("--poll-interval", type=float, default=None,
                        help="Seconds between toggle checks")
    parser.add_argument("--job-duration", type=float, default=None,
                        help="Seconds the stand-in job runs for")
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Collect command-line values that take precedence over worker.yaml."""
    overrides: dict[str, Any] = {"worker": {}, "logging": {}}
    if args.poll_interval is not None:
        overrides["worker"]["poll_interval_seconds"] = args.poll_interval
    if args.job_duration is not None:
        overrides["worker"]["job_duration_seconds"] = args.job_duration
    if args.log_level is not None:
        overrides["logging"]["level"] = args.log_level.upper()
    if args.json_logs is not None:
        overrides["logging"]["format_json"] = args.json_logs
    return overrides


def install_signal_handlers(worker: WorkerService) -> None:
    """Request cancellation on SIGINT and SIGTERM."""

    def _handle(signum, _frame) -> None:
        logger.info("Shutdown signal received", signal=signal.Signals(signum).name)
        worker.request_stop()

    # signal handlers can only be installed from the main thread
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGINT, _handle)
        signal.signal(signal.SIGTERM, _handle)


def run_host(argv: Optional[Sequence[str]] = None) -> int:
    """Run the worker until it is cancelled; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = ConfigLoader.create(args.config_dir).load(overrides_from_args(args))
    except ConfigurationError as exc:
        configure_logging()
        logger.error("Invalid configuration", error=str(exc))
        return EXIT_FAILURE

    configure_logging(
        level=config.logging.level,
        format_json=config.logging.format_json,
        include_caller=config.logging.include_caller,
    )

    try:
        worker = WorkerService(config)
    except MachineConfigurationError as exc:
        logger.error("State machine misconfigured", error=str(exc))
        return EXIT_FAILURE

    install_signal_handlers(worker)
    worker.start()

    # Wake periodically so signal handlers run on the main thread.
    while worker.is_alive and not worker.cancel.is_set():
        worker.cancel.wait(1.0)

    if not worker.stop():
        return EXIT_FAILURE

    status = worker.get_status()
    logger.info("Worker exited", **{k: v for k, v in status.items() if k != "transitions"})
    return EXIT_FAILURE if worker.faulted else EXIT_OK
