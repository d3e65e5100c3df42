"""A2UI wire schema: component nodes and the payload that carries them."""

from __future__ import annotations

from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PROTOCOL_VERSION = "1.0"

# Deepest node level a parsed payload keeps. The parser cuts ``children``
# below it; render limits must stay under it.
MAX_TREE_DEPTH = 128


class ComponentNode(BaseModel):
    """One typed, recursively nestable unit of UI intent.

    ``type`` comes from an open set: tags the consumer does not know are legal
    here and only matter at render time.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    type: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: tuple[ComponentNode, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        # Models sometimes emit numeric ids.
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("props", mode="before")
    @classmethod
    def _none_props(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("children", mode="before")
    @classmethod
    def _none_children(cls, v: Any) -> Any:
        return () if v is None else v

    def iter_nodes(self) -> Iterator[ComponentNode]:
        """Yield this node and its descendants depth-first, in render order."""
        stack: list[ComponentNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class Payload(BaseModel):
    """One complete A2UI message: a versioned forest of component nodes.

    Created once per agent turn and immutable afterwards. Node ids are render
    keys and must be unique across the whole tree.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    version: str = DEFAULT_PROTOCOL_VERSION
    components: tuple[ComponentNode, ...]

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, v: Any) -> Any:
        if v is None:
            return DEFAULT_PROTOCOL_VERSION
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @model_validator(mode="after")
    def _unique_ids(self) -> Payload:
        seen: set[str] = set()
        for node in self.iter_nodes():
            if node.id in seen:
                raise ValueError(f"duplicate component id '{node.id}'")
            seen.add(node.id)
        return self

    def iter_nodes(self) -> Iterator[ComponentNode]:
        for root in self.components:
            yield from root.iter_nodes()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


__all__ = ["ComponentNode", "Payload", "DEFAULT_PROTOCOL_VERSION", "MAX_TREE_DEPTH"]
