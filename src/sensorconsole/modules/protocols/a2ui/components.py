"""Builtin A2UI components for the environmental-monitoring console.

Props come from a language model, so every capability coerces what it reads
and falls back to a default instead of raising.
"""

from __future__ import annotations

from typing import Any, Mapping

from .registry import ComponentRegistry
from .types import Element

TEXT_STYLES = ("title", "body", "caption")
DEFAULT_TEXT_STYLE = "body"
DEFAULT_BUTTON_COLOR = "primary"
DEFAULT_ACCENT_CLASS = "bg-primary"


def _str_prop(props: Mapping[str, Any], name: str, default: str = "") -> str:
    value = props.get(name)
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def render_text(props: Mapping[str, Any]) -> Element:
    style = _str_prop(props, "style", DEFAULT_TEXT_STYLE)
    if style not in TEXT_STYLES:
        style = DEFAULT_TEXT_STYLE
    return Element(kind="text", attrs={"content": _str_prop(props, "content"), "style": style})


def render_button(props: Mapping[str, Any]) -> Element:
    return Element(
        kind="button",
        attrs={
            "label": _str_prop(props, "label"),
            "color": _str_prop(props, "color") or DEFAULT_BUTTON_COLOR,
        },
    )


def render_stat_card(props: Mapping[str, Any]) -> Element:
    color_class = _str_prop(props, "colorClass")
    # Hover accent bar: the text colour reused as a background.
    accent_class = color_class.replace("text-", "bg-") if color_class else DEFAULT_ACCENT_CLASS
    icon = _str_prop(props, "icon") or None
    return Element(
        kind="stat-card",
        attrs={
            "title": _str_prop(props, "title"),
            "value": _str_prop(props, "value"),
            "icon": icon,
            "color_class": color_class,
            "accent_class": accent_class,
        },
    )


def render_container(props: Mapping[str, Any]) -> Element:
    _ = props
    return Element(kind="container", attrs={"layout": "stack"})


def render_grid_container(props: Mapping[str, Any]) -> Element:
    _ = props
    return Element(kind="container", attrs={"layout": "grid"})


BUILTIN_COMPONENTS = {
    "text": render_text,
    "button": render_button,
    "stat-card": render_stat_card,
    "container": render_container,
    "grid-container": render_grid_container,
}


def register_builtin_components(registry: ComponentRegistry) -> None:
    for type_tag, capability in BUILTIN_COMPONENTS.items():
        registry.register(type_tag, capability)


__all__ = [
    "BUILTIN_COMPONENTS",
    "TEXT_STYLES",
    "register_builtin_components",
    "render_button",
    "render_container",
    "render_grid_container",
    "render_stat_card",
    "render_text",
]
