"""A2UI protocol (agent-to-UI): schema, recovery parser, registry, renderer."""

from __future__ import annotations

from .parser import (
    ParsedResponse,
    RecoveryParser,
    extract_candidate,
    parse_agent_response,
    parse_payload,
    repair_truncated_json,
)
from .registry import (
    ComponentRegistry,
    build_default_registry,
    get_component_registry,
    set_component_registry,
)
from .renderer import RenderEngine, render_payload
from .schema import MAX_TREE_DEPTH, ComponentNode, Payload
from .types import Capability, Element, RenderedNode

__all__ = [
    "Capability",
    "ComponentNode",
    "ComponentRegistry",
    "Element",
    "MAX_TREE_DEPTH",
    "ParsedResponse",
    "Payload",
    "RecoveryParser",
    "RenderEngine",
    "RenderedNode",
    "build_default_registry",
    "extract_candidate",
    "get_component_registry",
    "parse_agent_response",
    "parse_payload",
    "render_payload",
    "repair_truncated_json",
    "set_component_registry",
]
