"""
Stateful Worker - toggle-gated recurring job runner

A long-running background worker that cycles through a fixed sequence of
phases, waiting on an external toggle before each run of a recurring job.
"""

__version__ = "0.1.0"
__author__ = "Stateful Worker Team"
