"""
Recurring jobs executed while the worker is in the Running phase.
"""
from .runner import CallableJob, DelayJob, Job

__all__ = ["Job", "DelayJob", "CallableJob"]
