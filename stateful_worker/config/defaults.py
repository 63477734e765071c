"""Default configuration parameters for the stateful worker."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WorkerParams:
    """Phase cycle parameters."""
    poll_interval_seconds: float = 15.0      # Wait between toggle checks
    job_duration_seconds: float = 5.0        # Stand-in job delay
    clock_timezone: str = "local"            # "local" or "utc" wall clock
    history_size: int = 100                  # Transition records kept
    shutdown_timeout_seconds: float = 30.0   # Host wait for dispatch thread


@dataclass(frozen=True)
class LoggingParams:
    """Logging sink parameters."""
    level: str = "INFO"
    format_json: bool = False
    include_caller: bool = False


@dataclass(frozen=True)
class WorkerConfig:
    """Complete worker configuration."""
    worker: WorkerParams
    logging: LoggingParams


def get_default_config() -> WorkerConfig:
    """Get the default configuration instance."""
    return WorkerConfig(
        worker=WorkerParams(),
        logging=LoggingParams(),
    )
