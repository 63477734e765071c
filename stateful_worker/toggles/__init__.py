"""
Toggle sources gating the WaitingForReset and WaitingToRun phases.
"""
from .base import ToggleSource, resolve_condition
from .time_gate import MinuteParityToggle

__all__ = ["ToggleSource", "MinuteParityToggle", "resolve_condition"]
