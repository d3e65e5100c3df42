"""Core: configuration and the exception hierarchy."""

from __future__ import annotations

from .config import Config, get_core_config, set_core_config
from .exceptions import SensorConsoleError

__all__ = [
    "Config",
    "get_core_config",
    "set_core_config",
    "SensorConsoleError",
]
