"""Model registry for LLM providers."""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, cast

from sensorconsole.core import Config, get_core_config

from .base import BaseLLM

logger = logging.getLogger(__name__)

# Built-in model mappings
BUILTIN_LLMS: dict[str, str] = {
    # Gemini: API-key auth by default, Vertex AI when vertex.project_id is set.
    "google/*": "sensorconsole.modules.models.llm.gemini.GeminiLLM",
}


TItem = TypeVar("TItem")


class Registry(Generic[TItem]):
    """Minimal registry for model components."""

    def __init__(self, *, name: str, builtin_map: dict[str, str] | None = None) -> None:
        self._name = name
        self._items: dict[str, TItem] = {}
        self._builtin_map: dict[str, str] = builtin_map or {}

    def get(self, key: str) -> TItem:
        k = key.strip()
        if k not in self._items:
            raw: str | None = None

            # Exact builtin
            if k in self._builtin_map:
                raw = self._builtin_map[k]
            elif "/" in k:
                # Wildcard provider registration: `provider/*` matches any `provider/<name>`.
                provider, _name = k.split("/", 1)
                wildcard = f"{provider}/*"
                if wildcard in self._items:
                    return self._items[wildcard]
                if wildcard in self._builtin_map:
                    raw = self._builtin_map[wildcard]

            if raw is not None:
                # Lazy import
                mod_name, attr = raw.rsplit(".", 1)
                mod = importlib.import_module(mod_name)
                self._items[k] = cast(TItem, getattr(mod, attr))

        if k not in self._items:
            raise KeyError(f"{self._name}: unknown key '{k}'")
        return self._items[k]

    def register(self, key: str, value: TItem, *, overwrite: bool = False) -> None:
        k = key.strip()
        if not k:
            raise ValueError(f"{self._name}: registry key must be non-empty")
        if not overwrite and k in self._items:
            raise KeyError(f"{self._name}: '{k}' already registered")
        self._items[k] = value


@dataclass(frozen=True)
class ModelKey:
    provider: str
    name: str

    def as_str(self) -> str:
        return f"{self.provider}/{self.name}"


class ModelRegistry:
    def __init__(self) -> None:
        # Lazy builtin import map: keep startup fast and avoid importing optional deps.
        self._llms: Registry[type[BaseLLM]] = Registry(name="llms", builtin_map=BUILTIN_LLMS)

    def register_llm(
        self, provider: str, name: str, *, overwrite: bool = False
    ) -> Callable[[type[BaseLLM]], type[BaseLLM]]:
        key = ModelKey(provider=provider, name=name).as_str()

        def decorator(cls: type[BaseLLM]) -> type[BaseLLM]:
            self._llms.register(key, cls, overwrite=overwrite)
            return cls

        return decorator

    def create_llm(
        self, key: str | None = None, *, config: Config | None = None, **kwargs: object
    ) -> BaseLLM:
        cfg = config or get_core_config()
        k = (key or cfg.models.default_llm).strip()
        if "/" not in k:
            raise ValueError("LLM key must be 'provider/name' (e.g. 'google/gemini-flash-latest')")
        cls = self._llms.get(k)
        if "model_name" not in kwargs:
            _provider, name = k.split("/", 1)
            kwargs = dict(kwargs)
            kwargs["model_name"] = name
        logger.debug("Creating LLM %s via %s", k, cls.__name__)
        ctor = cast(Callable[..., BaseLLM], cls)
        return ctor(cfg, **kwargs)


model_registry = ModelRegistry()

__all__ = ["ModelKey", "ModelRegistry", "Registry", "model_registry"]
