"""Tests for the A2UI render engine.

Tests cover:
- builtin components and their prop coercions
- unknown types degrade into diagnostic leaves without their children
- depth bound fails closed into a single diagnostic node
- rendering is total and never mutates the payload
"""

from __future__ import annotations

import pytest

from sensorconsole.core.config import Config, set_core_config
from sensorconsole.modules.protocols.a2ui import (
    ComponentNode,
    ComponentRegistry,
    Element,
    Payload,
    RenderEngine,
    build_default_registry,
    render_payload,
)
from sensorconsole.modules.protocols.a2ui.renderer import (
    MAX_DEPTH_EXCEEDED,
    RENDER_FAILED,
    UNKNOWN_TYPE,
)
from sensorconsole.modules.protocols.a2ui.schema import MAX_TREE_DEPTH

DEFAULT_LIMIT = 64


def _node(node_id, type_tag, props=None, children=()):
    return ComponentNode(id=node_id, type=type_tag, props=props or {}, children=tuple(children))


def _chain(depth: int) -> ComponentNode:
    node = _node("leaf", "text", {"content": "bottom"})
    for i in range(depth - 1):
        node = _node(f"c{i}", "container", children=[node])
    return node


# ============================================================================
# Builtin components
# ============================================================================


class TestBuiltins:
    def test_text_style_defaults_to_body(self):
        engine = RenderEngine()
        assert engine.render(_node("a", "text", {"content": "x"})).attrs["style"] == "body"
        assert engine.render(_node("a", "text", {"content": "x", "style": "huge"})).attrs["style"] == "body"
        assert engine.render(_node("a", "text", {"content": "x", "style": "title"})).attrs["style"] == "title"

    def test_button_default_color(self):
        out = RenderEngine().render(_node("b", "button", {"label": "Refresh"}))
        assert out.kind == "button"
        assert out.attrs == {"label": "Refresh", "color": "primary"}

    def test_stat_card_props(self):
        out = RenderEngine().render(
            _node(
                "s",
                "stat-card",
                {"title": "Temperature", "value": 24, "icon": "thermostat", "colorClass": "text-orange-400"},
            )
        )
        assert out.kind == "stat-card"
        assert out.attrs["value"] == "24"
        assert out.attrs["icon"] == "thermostat"
        assert out.attrs["color_class"] == "text-orange-400"
        assert out.attrs["accent_class"] == "bg-orange-400"

    def test_stat_card_without_color_uses_default_accent(self):
        out = RenderEngine().render(_node("s", "stat-card", {"title": "T", "value": "1"}))
        assert out.attrs["accent_class"] == "bg-primary"
        assert out.attrs["icon"] is None

    def test_containers_render_children_in_order(self):
        tree = _node(
            "g",
            "grid-container",
            {"ignored": True},
            [_node("one", "stat-card", {"title": "A", "value": "1"}), _node("two", "text", {"content": "B"})],
        )
        out = RenderEngine().render(tree)
        assert out.kind == "container"
        assert out.attrs == {"layout": "grid"}
        assert [c.key for c in out.children] == ["one", "two"]

        stack = RenderEngine().render(_node("c", "container"))
        assert stack.attrs == {"layout": "stack"}


# ============================================================================
# Unknown types
# ============================================================================


class TestUnknownTypes:
    def test_unknown_child_becomes_diagnostic_leaf(self):
        tree = _node(
            "root",
            "container",
            children=[
                _node("a", "text", {"content": "before"}),
                _node("x", "holo-grid", children=[_node("z", "text", {"content": "hidden"})]),
                _node("b", "button", {"label": "after"}),
            ],
        )
        out = RenderEngine().render(tree)

        assert [c.key for c in out.children] == ["a", "x", "b"]
        diag = out.children[1]
        assert diag.is_diagnostic
        assert diag.attrs["reason"] == UNKNOWN_TYPE
        assert diag.attrs["unresolved_type"] == "holo-grid"
        assert "holo-grid" in diag.attrs["message"]
        assert diag.children == ()
        assert "z" not in {n.key for n in out.iter_nodes()}
        assert out.children[0].attrs["content"] == "before"
        assert out.children[2].attrs["label"] == "after"

    def test_unknown_root(self):
        out = RenderEngine().render(_node("r", "sparkline"))
        assert out.is_diagnostic
        assert out.key == "r"
        assert out.type == "sparkline"

    def test_custom_registry_extends_without_engine_changes(self):
        reg = build_default_registry()
        reg.register("holo-grid", lambda props: Element(kind="holo", attrs={"size": props.get("size")}))
        out = RenderEngine(reg).render(_node("x", "holo-grid", {"size": 3}, [_node("z", "text")]))
        assert out.kind == "holo"
        assert out.attrs == {"size": 3}
        assert [c.key for c in out.children] == ["z"]


# ============================================================================
# Depth bound
# ============================================================================


class TestDepthBound:
    def test_tree_at_limit_renders(self):
        out = RenderEngine().render(_chain(DEFAULT_LIMIT))
        assert not any(n.is_diagnostic for n in out.iter_nodes())
        assert sum(1 for _ in out.iter_nodes()) == DEFAULT_LIMIT

    def test_tree_over_limit_is_single_diagnostic(self):
        tree = _chain(DEFAULT_LIMIT + 1)
        out = RenderEngine().render(tree)
        assert out.is_diagnostic
        assert out.key == tree.id
        assert out.attrs["reason"] == MAX_DEPTH_EXCEEDED
        assert out.attrs["limit"] == DEFAULT_LIMIT
        assert out.children == ()

    def test_very_deep_tree_does_not_overflow(self):
        out = RenderEngine().render(_chain(5000))
        assert out.is_diagnostic
        assert out.attrs["reason"] == MAX_DEPTH_EXCEEDED

    def test_custom_limit(self):
        engine = RenderEngine(max_depth=3)
        assert not engine.render(_chain(3)).is_diagnostic
        assert engine.render(_chain(4)).is_diagnostic

    def test_deep_root_does_not_affect_siblings(self):
        payload = Payload(components=(_chain(100), _node("ok", "text", {"content": "fine"})))
        deep, ok = RenderEngine().render_payload(payload)
        assert deep.is_diagnostic
        assert ok.attrs["content"] == "fine"

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            RenderEngine(max_depth=0)
        with pytest.raises(ValueError):
            RenderEngine(max_depth=MAX_TREE_DEPTH)
        assert RenderEngine(max_depth=MAX_TREE_DEPTH - 1).max_depth == MAX_TREE_DEPTH - 1

    def test_default_limit_follows_config(self):
        assert RenderEngine().max_depth == DEFAULT_LIMIT
        assert RenderEngine(max_depth=None).max_depth == DEFAULT_LIMIT

        set_core_config(Config.model_validate({"a2ui": {"max_render_depth": 2}}))
        engine = RenderEngine(max_depth=None)
        assert engine.max_depth == 2
        assert engine.render(_chain(3)).is_diagnostic
        assert render_payload(Payload(components=(_chain(3),)))[0].is_diagnostic


# ============================================================================
# Totality / purity
# ============================================================================


class TestTotality:
    def test_failing_capability_is_contained(self):
        reg = build_default_registry()

        def broken(props):
            raise RuntimeError("bad props")

        reg.register("broken", broken)
        reg.register("wrong-return", lambda props: {"kind": "dict"})
        tree = _node(
            "root",
            "container",
            children=[
                _node("a", "broken", children=[_node("z", "text")]),
                _node("b", "wrong-return"),
                _node("c", "text", {"content": "ok"}),
            ],
        )
        out = RenderEngine(reg).render(tree)
        a, b, c = out.children
        assert a.is_diagnostic and a.attrs["reason"] == RENDER_FAILED
        assert a.children == ()
        assert b.is_diagnostic and b.attrs["reason"] == RENDER_FAILED
        assert c.attrs["content"] == "ok"

    def test_shape_is_preserved_except_unknown_subtrees(self):
        payload = Payload(
            components=(
                _node(
                    "r",
                    "container",
                    children=[
                        _node("g", "grid-container", children=[_node(f"s{i}", "stat-card") for i in range(3)]),
                        _node("u", "mystery", children=[_node("u1", "text"), _node("u2", "text")]),
                        _node("t", "text", {"content": 5}),
                    ],
                ),
            )
        )
        before = payload.to_dict()
        (out,) = render_payload(payload)

        rendered_keys = [n.key for n in out.iter_nodes()]
        source_keys = [n.id for n in payload.iter_nodes() if n.id not in {"u1", "u2"}]
        assert rendered_keys == source_keys
        assert payload.to_dict() == before

    def test_capability_cannot_mutate_payload_props(self):
        reg = build_default_registry()

        def greedy(props):
            props["injected"] = True
            props["nested"]["items"].append(99)
            return Element(kind="greedy", attrs=dict(props))

        reg.register("greedy", greedy)
        payload = Payload(components=(_node("a", "greedy", {"k": 1, "nested": {"items": [1]}}),))
        before = payload.to_dict()

        (out,) = RenderEngine(reg).render_payload(payload)
        (out_again,) = RenderEngine(reg).render_payload(payload)

        assert payload.components[0].props == {"k": 1, "nested": {"items": [1]}}
        assert payload.to_dict() == before
        assert out.attrs["injected"] is True
        assert out_again.attrs["nested"] == {"items": [1, 99]}

    def test_empty_registry_renders_everything_as_diagnostics(self):
        out = RenderEngine(ComponentRegistry()).render(_node("a", "text", children=[_node("b", "text")]))
        assert out.is_diagnostic
        assert out.children == ()

    def test_serialisations(self):
        out = RenderEngine().render(
            _node("root", "container", children=[_node("t", "text", {"content": "Hi"}), _node("x", "nope")])
        )
        data = out.to_dict()
        assert data["kind"] == "container"
        assert data["children"][0]["attrs"] == {"content": "Hi", "style": "body"}

        lines = out.outline().splitlines()
        assert lines[0].startswith("container[root]")
        assert lines[1].startswith("  text[t]")
        assert "Unknown Interface Node: nope" in lines[2]
