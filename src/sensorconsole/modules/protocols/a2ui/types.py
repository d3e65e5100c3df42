"""Rendered-tree types shared by the registry, builtin components and engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

DIAGNOSTIC_KIND = "diagnostic"


@dataclass(frozen=True)
class Element:
    """What a capability materialises for a single node (children excluded)."""

    kind: str
    attrs: Mapping[str, Any] = field(default_factory=dict)


# A capability receives a node's props and returns its element.
Capability = Callable[[Mapping[str, Any]], Element]


@dataclass(frozen=True)
class RenderedNode:
    """One node of the rendered UI tree.

    ``key`` is the source node's ``id``; ``type`` its original type tag.
    """

    key: str
    type: str
    kind: str
    attrs: Mapping[str, Any] = field(default_factory=dict)
    children: tuple[RenderedNode, ...] = ()

    @property
    def is_diagnostic(self) -> bool:
        return self.kind == DIAGNOSTIC_KIND

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "type": self.type,
            "kind": self.kind,
            "attrs": dict(self.attrs),
            "children": [child.to_dict() for child in self.children],
        }

    def iter_nodes(self):
        stack: list[RenderedNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def outline(self, indent: str = "  ") -> str:
        """Plain-text tree, one node per line."""
        lines: list[str] = []
        stack: list[tuple[RenderedNode, int]] = [(self, 0)]
        while stack:
            node, level = stack.pop()
            lines.append(f"{indent * level}{node._summary()}")
            stack.extend((child, level + 1) for child in reversed(node.children))
        return "\n".join(lines)

    def _summary(self) -> str:
        if self.is_diagnostic:
            return f"! {self.attrs.get('message', 'diagnostic')} [{self.key}]"
        shown = ", ".join(f"{k}={v!r}" for k, v in self.attrs.items() if v not in (None, ""))
        return f"{self.kind}[{self.key}]" + (f" {shown}" if shown else "")


__all__ = ["Capability", "DIAGNOSTIC_KIND", "Element", "RenderedNode"]
