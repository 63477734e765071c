"""
Minute-parity toggle.

Stands in for a real feature-flag provider: the toggle reads as unset
during even wall-clock minutes and as set during odd ones.
"""

from typing import Optional

from ..utils.time import Clock, local_now
from .base import ToggleSource


class MinuteParityToggle(ToggleSource):
    """Toggle derived from the parity of the current wall-clock minute."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock or local_now

    def unset(self) -> bool:
        return self.clock().minute % 2 == 0

    def set(self) -> bool:
        return self.clock().minute % 2 == 1
