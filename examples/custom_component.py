"""Example of registering a custom A2UI component at startup.

Components map an A2UI type tag to a capability that turns the node's props
into a rendered element. The engine itself never changes.
"""

from sensorconsole.modules.protocols.a2ui import (
    Element,
    RenderEngine,
    build_default_registry,
    parse_payload,
    set_component_registry,
)

registry = build_default_registry()


@registry.component("sensor-gauge")
def sensor_gauge(props):
    """A gauge for one sensor reading, clamped to its range."""
    low = float(props.get("min", 0))
    high = float(props.get("max", 100))
    value = min(max(float(props.get("value", low)), low), high)
    return Element(
        kind="gauge",
        attrs={"label": str(props.get("label", "")), "value": value, "min": low, "max": high},
    )


# Init-once: after this the process-wide registry is read-only.
set_component_registry(registry)


RAW_AGENT_REPLY = """Here is the humidity overview:
```json
{"version": "1.0", "components": [
  {"id": "g", "type": "grid-container", "children": [
    {"id": "h1", "type": "sensor-gauge", "props": {"label": "Hub A humidity", "value": 64, "max": 100}},
    {"id": "h2", "type": "sensor-gauge", "props": {"label": "Hub B humidity", "value": 71
"""


def main():
    payload = parse_payload(RAW_AGENT_REPLY)
    for node in RenderEngine().render_payload(payload):
        print(node.outline())


if __name__ == "__main__":
    main()
