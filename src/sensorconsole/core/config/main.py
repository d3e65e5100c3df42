"""Main configuration class that combines all config modules."""

import logging
import tomllib
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .base import get_bool_env, get_env, get_int_env
from .models import MAX_RENDER_DEPTH, A2UIConfig, LLMConfig, ModelsConfig
from .providers import GoogleAIConfig, VertexConfig

DEFAULT_CONFIG_FILENAME = "settings.toml"


class Config(BaseModel):
    """Main configuration class for SensorConsole.

    Configuration is loaded from multiple sources in priority order:
    1. Environment variables
    2. TOML configuration file
    3. Default values
    """

    model_config = ConfigDict(extra="ignore")

    # Core settings
    debug: bool = False
    log_level: str = "INFO"

    # Sub-configurations
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    a2ui: A2UIConfig = Field(default_factory=A2UIConfig)

    # Provider configurations
    google: GoogleAIConfig = Field(default_factory=GoogleAIConfig)
    vertex: VertexConfig = Field(default_factory=VertexConfig)

    # Internal state
    loaded_from: list[Path] = Field(default_factory=list)

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "Config":
        """Load configuration from files and environment."""
        load_dotenv()

        core_config_path = get_env("SENSORCONSOLE_CONFIG_PATH")

        config = cls()

        toml_path = (
            Path(config_path)
            if config_path
            else (
                Path(core_config_path).resolve()
                if core_config_path
                else Path.cwd() / DEFAULT_CONFIG_FILENAME
            )
        )
        if toml_path.exists():
            try:
                with open(toml_path, "rb") as f:
                    toml_data = tomllib.load(f)

                toml_data.pop("loaded_from", None)

                # Merge TOML data with defaults using Pydantic
                config_dict = config.model_dump(by_alias=False)
                for key, value in toml_data.items():
                    if isinstance(value, dict) and isinstance(config_dict.get(key), dict):
                        config_dict[key] = {**config_dict[key], **value}
                    else:
                        config_dict[key] = value
                config = cls.model_validate(config_dict)
                config.loaded_from.append(toml_path)
            except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
                logger = logging.getLogger(__name__)
                logger.warning("Failed to load TOML config from %s: %s", toml_path, e)

        # Override with environment variables
        config._apply_env_overrides()

        return config

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to config."""
        if llm_val := get_env("SENSORCONSOLE_DEFAULT_LLM"):
            self.models.default_llm = llm_val

        # Google AI (Gemini Developer API)
        if api_key := get_env("GOOGLE_API_KEY") or get_env("GEMINI_API_KEY"):
            self.google.api_key = api_key

        # Vertex configuration
        if project_id := get_env("SENSORCONSOLE_VERTEX_PROJECT_ID"):
            self.vertex.project_id = project_id
        if location := get_env("SENSORCONSOLE_VERTEX_LOCATION"):
            self.vertex.location = location

        # A2UI
        depth = get_int_env("SENSORCONSOLE_MAX_RENDER_DEPTH")
        if depth is not None and 0 < depth <= MAX_RENDER_DEPTH:
            self.a2ui.max_render_depth = depth

        # Debug/Logging
        if (debug_val := get_bool_env("SENSORCONSOLE_DEBUG")) is not None:
            self.debug = debug_val
        if log_level := get_env("SENSORCONSOLE_LOG_LEVEL"):
            self.log_level = log_level


# ---- Global config management ----

_GLOBAL_CONFIG: Config | None = None


def get_core_config() -> Config:
    """Return process-global core config (for framework modules)."""
    global _GLOBAL_CONFIG
    if _GLOBAL_CONFIG is None:
        _GLOBAL_CONFIG = Config.load()
    return _GLOBAL_CONFIG


def set_core_config(config: Config | None) -> None:
    """Set the global core config (``None`` resets to lazy loading)."""
    global _GLOBAL_CONFIG
    _GLOBAL_CONFIG = config
