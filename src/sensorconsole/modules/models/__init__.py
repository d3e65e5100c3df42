"""Model layer (LLM providers) decoupled from the agent."""

from __future__ import annotations

from .base import BaseLLM
from .registry import ModelRegistry, model_registry

__all__ = [
    "BaseLLM",
    "ModelRegistry",
    "model_registry",
]
