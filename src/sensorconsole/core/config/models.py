"""Model and LLM configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelsConfig(BaseModel):
    # Accept both `default_llm` and canonical `default` from TOML/env.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    default_llm: str = Field(default="google/gemini-flash-latest", alias="default")


class LLMConfig(BaseModel):
    """Provider-agnostic LLM request controls.

    Low temperature keeps the A2UI JSON output consistent; the token limit is
    sized for nested dashboards.
    """

    model_config = ConfigDict(extra="ignore")

    temperature: float = 0.1
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 2048
    timeout_sec: float = 60.0
    max_retries: int = 0
    # Gemini safety filter for HARM_CATEGORY_HARASSMENT (HarmBlockThreshold name).
    harassment_block_threshold: str = "BLOCK_MEDIUM_AND_ABOVE"


# Parsed payloads keep at most 128 node levels; render limits stay below that.
MAX_RENDER_DEPTH = 127


class A2UIConfig(BaseModel):
    """Agent-to-UI protocol settings.

    ``protocol_version`` is stamped on payloads the console builds itself.
    """

    model_config = ConfigDict(extra="ignore")

    protocol_version: str = "1.0"
    max_render_depth: int = Field(default=64, ge=1, le=MAX_RENDER_DEPTH)
