"""Component registry: A2UI type tag -> rendering capability.

The registry is open: new types are registered without touching the render
engine. It has an explicit init-once lifecycle. It is populated at startup,
then ``freeze()``-ed and only read afterwards, so renders need no locking.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator

from sensorconsole.core.exceptions import RegistryFrozenError

from .types import Capability

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """Exactly one capability per type tag; re-registration overwrites."""

    def __init__(self, *, name: str = "a2ui-components") -> None:
        self._name = name
        self._items: dict[str, Capability] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> ComponentRegistry:
        self._frozen = True
        return self

    def register(self, type_tag: str, capability: Capability, *, overwrite: bool = True) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"{self._name}: cannot register '{type_tag}' after freeze()")
        k = type_tag.strip()
        if not k:
            raise ValueError(f"{self._name}: registry key must be non-empty")
        if not callable(capability):
            raise TypeError(f"{self._name}: capability for '{k}' must be callable")
        if k in self._items:
            if not overwrite:
                raise KeyError(f"{self._name}: '{k}' already registered")
            logger.debug("%s: overwriting capability for '%s'", self._name, k)
        self._items[k] = capability

    def component(self, type_tag: str) -> Callable[[Capability], Capability]:
        """Decorator form of :meth:`register`."""

        def decorator(fn: Capability) -> Capability:
            self.register(type_tag, fn)
            return fn

        return decorator

    def resolve(self, type_tag: str) -> Capability | None:
        """Pure lookup; unknown tags give ``None``."""
        if not isinstance(type_tag, str):
            return None
        return self._items.get(type_tag)

    def types(self) -> list[str]:
        return sorted(self._items)

    def copy(self, *, name: str | None = None) -> ComponentRegistry:
        """Unfrozen copy, for extending a frozen registry at startup."""
        clone = ComponentRegistry(name=name or self._name)
        clone._items = dict(self._items)
        return clone

    def __contains__(self, type_tag: object) -> bool:
        return isinstance(type_tag, str) and type_tag in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self.types())

    def __len__(self) -> int:
        return len(self._items)


def build_default_registry() -> ComponentRegistry:
    """Fresh, unfrozen registry holding the builtin components."""
    from .components import register_builtin_components

    registry = ComponentRegistry()
    register_builtin_components(registry)
    return registry


_DEFAULT_REGISTRY: ComponentRegistry | None = None
_DEFAULT_LOCK = threading.Lock()


def get_component_registry() -> ComponentRegistry:
    """Process-wide registry: builtins, built on first use, then frozen."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        with _DEFAULT_LOCK:
            if _DEFAULT_REGISTRY is None:
                _DEFAULT_REGISTRY = build_default_registry().freeze()
    return _DEFAULT_REGISTRY


def set_component_registry(registry: ComponentRegistry | None) -> None:
    """Install the process-wide registry (frozen on install); ``None`` resets."""
    global _DEFAULT_REGISTRY
    with _DEFAULT_LOCK:
        _DEFAULT_REGISTRY = registry.freeze() if registry is not None else None


__all__ = [
    "ComponentRegistry",
    "build_default_registry",
    "get_component_registry",
    "set_component_registry",
]
