"""
Centralized logging configuration for the stateful worker.

This module provides standardized logging configuration using structlog
for all components. Phase entries, trigger firings and poll ticks are all
emitted through the helpers below so every event carries the same keys.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    # force=True so the host can reconfigure after an early default setup
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_gating_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for toggle polling decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the gating subsystem
    """
    return structlog.get_logger(name, subsystem="gating")


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for phase entries and state transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the state machine subsystem
    """
    return structlog.get_logger(name, subsystem="state_machine")


def log_phase_entry(
    logger: FilteringBoundLogger,
    state: str,
    handler: str,
) -> None:
    """Log entry into a phase handler."""
    logger.info(
        "Entered phase",
        state=state,
        handler=handler,
        event_type="phase_entry",
    )


def log_trigger_fired(
    logger: FilteringBoundLogger,
    state: str,
    trigger: str,
) -> None:
    """Log a handler firing its exit trigger from the current state."""
    logger.info(
        "Firing trigger",
        state=state,
        trigger=trigger,
        event_type="trigger_fired",
    )


def log_poll_tick(
    logger: FilteringBoundLogger,
    state: str,
    condition: str,
    result: bool,
    iteration: int,
) -> None:
    """
    Log a single evaluation of a toggle condition.

    Args:
        logger: Structlog logger instance
        state: Current state while polling
        condition: Name of the toggle condition evaluated ("unset" or "set")
        result: Evaluated boolean result
        iteration: 1-based poll iteration within the current phase
    """
    logger.debug(
        "Checked toggle condition",
        state=state,
        condition=condition,
        result=result,
        iteration=iteration,
        event_type="poll_tick",
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an applied state transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_state: State before the transition
        to_state: State after the transition
        trigger: Trigger that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
        event_type="state_transition"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")
