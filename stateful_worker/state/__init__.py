"""
Phase state machine module.

Drives the worker through STARTUP → WAITING_FOR_RESET → WAITING_TO_RUN →
RUNNING → WAITING_FOR_RESET → ... with one phase handler active at a time.
"""
