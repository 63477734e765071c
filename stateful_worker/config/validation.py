"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import LoggingParams, WorkerParams

VALID_TIMEZONES = ("local", "utc")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid duration
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def _unknown_keys(section: str, params: dict[str, Any], known: set[str]) -> list[ValidationError]:
        return [
            ValidationError(field=f"{section}.{key}", message="Unknown configuration key", value=params[key])
            for key in params
            if key not in known
        ]

    @staticmethod
    def validate_worker_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate phase cycle parameters."""
        errors = ConfigValidator._unknown_keys(
            "worker", params, {f.name for f in fields(WorkerParams)}
        )

        # Validate poll_interval_seconds
        if "poll_interval_seconds" in params:
            value = params["poll_interval_seconds"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="worker.poll_interval_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        # Validate job_duration_seconds
        if "job_duration_seconds" in params:
            value = params["job_duration_seconds"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="worker.job_duration_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        # Validate clock_timezone
        if "clock_timezone" in params:
            value = params["clock_timezone"]
            if value not in VALID_TIMEZONES:
                errors.append(ValidationError(
                    field="worker.clock_timezone",
                    message=f"Must be one of {', '.join(VALID_TIMEZONES)}",
                    value=value
                ))

        # Validate history_size
        if "history_size" in params:
            value = params["history_size"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="worker.history_size",
                    message="Must be a positive integer",
                    value=value
                ))

        # Validate shutdown_timeout_seconds
        if "shutdown_timeout_seconds" in params:
            value = params["shutdown_timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="worker.shutdown_timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = ConfigValidator._unknown_keys(
            "logging", params, {f.name for f in fields(LoggingParams)}
        )

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                    value=value
                ))

        for flag in ("format_json", "include_caller"):
            if flag in params and not isinstance(params[flag], bool):
                errors.append(ValidationError(
                    field=f"logging.{flag}",
                    message="Must be a boolean",
                    value=params[flag]
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        for section in config:
            if section not in ("worker", "logging"):
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=config[section]
                ))

        if "worker" in config:
            if isinstance(config["worker"], dict):
                errors.extend(ConfigValidator.validate_worker_params(config["worker"]))
            else:
                errors.append(ValidationError(field="worker", message="Must be a mapping", value=config["worker"]))

        if "logging" in config:
            if isinstance(config["logging"], dict):
                errors.extend(ConfigValidator.validate_logging_params(config["logging"]))
            else:
                errors.append(ValidationError(field="logging", message="Must be a mapping", value=config["logging"]))

        return errors
