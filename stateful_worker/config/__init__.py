"""
Worker configuration: defaults, YAML loading and validation.
"""
from .defaults import WorkerConfig, get_default_config
from .loader import ConfigLoader

__all__ = ["WorkerConfig", "get_default_config", "ConfigLoader"]
