"""
Utility functions module.

Time Semantics:
- The toggle stand-in reads wall-clock time; local time by default, UTC on request
- Transition records are stamped in UTC regardless of the toggle clock
"""
