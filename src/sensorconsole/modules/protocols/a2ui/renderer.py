"""Recursive render engine: ``ComponentNode`` tree -> ``RenderedNode`` tree.

Each node is resolved against a :class:`ComponentRegistry`. Unknown types do
not raise: they become a diagnostic leaf and their children are dropped.
Trees deeper than ``max_depth`` fail closed into a single diagnostic node.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from sensorconsole.core.config import get_core_config

from .registry import ComponentRegistry, get_component_registry
from .schema import MAX_TREE_DEPTH, ComponentNode, Payload
from .types import DIAGNOSTIC_KIND, Element, RenderedNode

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "unknown_type"
MAX_DEPTH_EXCEEDED = "max_depth_exceeded"
RENDER_FAILED = "render_failed"


class _DepthExceeded(Exception):
    pass


def diagnostic_node(node: ComponentNode, reason: str, message: str, **extra: Any) -> RenderedNode:
    attrs: dict[str, Any] = {"reason": reason, "message": message, "unresolved_type": node.type}
    attrs.update(extra)
    return RenderedNode(key=node.id, type=node.type, kind=DIAGNOSTIC_KIND, attrs=attrs)


class RenderEngine:
    """Stateless between calls; safe to share across turns and tasks.

    ``max_depth`` defaults to ``a2ui.max_render_depth`` from the core config.
    Capabilities receive a copy of the node's props, never the payload's own.
    """

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        *,
        max_depth: int | None = None,
    ) -> None:
        if max_depth is None:
            max_depth = get_core_config().a2ui.max_render_depth
        if not 1 <= max_depth < MAX_TREE_DEPTH:
            raise ValueError(f"max_depth must be between 1 and {MAX_TREE_DEPTH - 1}")
        self._registry = registry
        self._max_depth = max_depth

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry if self._registry is not None else get_component_registry()

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def render(self, node: ComponentNode) -> RenderedNode:
        registry = self.registry
        try:
            return self._render(node, registry, 1)
        except (_DepthExceeded, RecursionError):
            logger.warning(
                "A2UI tree under '%s' exceeds max render depth %d", node.id, self._max_depth
            )
            return diagnostic_node(
                node,
                MAX_DEPTH_EXCEEDED,
                f"[SYSTEM_ERROR] Interface tree exceeds maximum depth {self._max_depth}",
                limit=self._max_depth,
            )

    def render_payload(self, payload: Payload) -> tuple[RenderedNode, ...]:
        return tuple(self.render(root) for root in payload.components)

    def _render(self, node: ComponentNode, registry: ComponentRegistry, depth: int) -> RenderedNode:
        if depth > self._max_depth:
            raise _DepthExceeded()

        capability = registry.resolve(node.type)
        if capability is None:
            logger.debug("Unknown A2UI node type '%s' (id=%s)", node.type, node.id)
            return diagnostic_node(
                node, UNKNOWN_TYPE, f"[SYSTEM_ERROR] Unknown Interface Node: {node.type}"
            )

        try:
            element = capability(copy.deepcopy(node.props))
        except Exception as e:
            logger.exception("A2UI capability for '%s' failed (id=%s)", node.type, node.id)
            return diagnostic_node(
                node, RENDER_FAILED, f"[SYSTEM_ERROR] Failed to render {node.type}: {e}"
            )
        if not isinstance(element, Element):
            logger.error(
                "A2UI capability for '%s' returned %s, expected Element",
                node.type,
                type(element).__name__,
            )
            return diagnostic_node(
                node, RENDER_FAILED, f"[SYSTEM_ERROR] Failed to render {node.type}"
            )

        children = tuple(self._render(child, registry, depth + 1) for child in node.children)
        return RenderedNode(
            key=node.id,
            type=node.type,
            kind=element.kind,
            attrs=dict(element.attrs),
            children=children,
        )


def render_payload(
    payload: Payload,
    *,
    registry: ComponentRegistry | None = None,
    max_depth: int | None = None,
) -> tuple[RenderedNode, ...]:
    return RenderEngine(registry, max_depth=max_depth).render_payload(payload)


__all__ = [
    "MAX_DEPTH_EXCEEDED",
    "RENDER_FAILED",
    "UNKNOWN_TYPE",
    "RenderEngine",
    "diagnostic_node",
    "render_payload",
]
