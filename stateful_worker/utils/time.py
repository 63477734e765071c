"""
Wall-clock time helpers.

The minute-parity toggle is driven by whatever clock it is given; these
helpers build that clock and stamp transition records.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local wall-clock time, timezone-aware."""
    return datetime.now().astimezone()


def utc_now() -> datetime:
    """Current UTC wall-clock time."""
    return datetime.now(timezone.utc)


def get_clock(clock_timezone: str = "local") -> Clock:
    """
    Resolve a configured clock name to a clock function.

    Args:
        clock_timezone: "local" or "utc"

    Returns:
        Zero-argument callable returning the current time
    """
    if clock_timezone == "utc":
        return utc_now
    if clock_timezone == "local":
        return local_now
    raise ValueError(f"Unknown clock timezone: {clock_timezone}")


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always returns the same instant."""
    return lambda: moment


def format_wall_time(ts: datetime) -> str:
    """
    Format a timestamp for logging and transition records.

    Returns:
        ISO8601 formatted string
    """
    return ts.isoformat()
