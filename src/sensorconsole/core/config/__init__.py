"""Modular configuration system for SensorConsole."""

from .base import (
    get_bool_env,
    get_env,
    get_int_env,
)
from .main import (
    Config,
    get_core_config,
    set_core_config,
)
from .models import (
    MAX_RENDER_DEPTH,
    A2UIConfig,
    LLMConfig,
    ModelsConfig,
)
from .providers import (
    GoogleAIConfig,
    VertexConfig,
)

__all__ = [
    # Main classes
    "Config",
    # Main functions
    "get_core_config",
    "set_core_config",
    # Base utilities
    "get_env",
    "get_bool_env",
    "get_int_env",
    # Model configs
    "ModelsConfig",
    "LLMConfig",
    "A2UIConfig",
    "MAX_RENDER_DEPTH",
    # Provider configs
    "GoogleAIConfig",
    "VertexConfig",
]
