"""Item renderers — turn an item's model into drawable attributes.

The host surface calls draw() when an item is created and on_after_update()
after every model change. Both recompute from the item's FULL model, never
from the incremental patch that triggered the update: an update that only
carries, say, a new position must not drop the item's active states.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from graphstate.adapter import Item, Shape, ShapeGroup
from graphstate.resolver import resolve_style
from graphstate.theme import EDGE_BASE_STYLE, LABEL_BASE_STYLE, LABEL_KEY, NODE_BASE_STYLE, THEME

logger = logging.getLogger("graphstate.renderer")

KEY_SHAPE = "key-shape"
EDGE_SHAPE = "edge-shape"
LABEL_SHAPE = "center-label"

# Shape kinds that can never act as an item's primary shape
_NON_KEY_KINDS = frozenset({"text", "dom", "gui"})


def _find(group: ShapeGroup, name: str) -> Shape | None:
    for shape in group.children():
        if shape.name == name:
            return shape
    return None


def find_key_shape(group: ShapeGroup) -> Shape | None:
    """Primary shape: by name first, then the first non-text child."""
    for name in (KEY_SHAPE, EDGE_SHAPE):
        shape = _find(group, name)
        if shape is not None and shape.kind not in _NON_KEY_KINDS:
            return shape
    for shape in group.children():
        if shape.kind not in _NON_KEY_KINDS:
            return shape
    return None


def base_style_for(model: Mapping[str, Any], default: Mapping[str, Any]) -> dict[str, Any]:
    base = dict(default)
    base.update(model.get("default_style") or {})
    user_style = model.get("style") or {}
    if user_style.get("fill"):
        base["fill"] = user_style["fill"]
    return base


def apply_visuals(
    model: Mapping[str, Any] | None,
    group: ShapeGroup | None,
    default_style: Mapping[str, Any] = NODE_BASE_STYLE,
) -> dict[str, Any] | None:
    """Resolve the model's style and apply it to the group's shapes.

    Returns the resolved style, or None when there is nothing to draw on.
    """
    if not model or group is None:
        return None
    key_shape = find_key_shape(group)
    if key_shape is None:
        return None

    final_style = resolve_style(
        base_style_for(model, default_style),
        model.get("state_styles") or {},
        model.get("active_states") or [],
        model.get("state_priorities"),
        definitions=model.get("state_definitions") or THEME,
    )
    label_fragment = final_style.pop(LABEL_KEY, None) or {}
    logger.debug("Visuals for %r: %s -> %s", model.get("id"), model.get("active_states"), final_style)
    key_shape.attr(final_style)

    label_shape = _find(group, LABEL_SHAPE)
    if label_shape is not None:
        # Reset first so stroke/shadow from an earlier state cannot bleed through
        label_style = dict(LABEL_BASE_STYLE)
        label_style.update(model.get("label_style") or {})
        label_style.update(label_fragment)
        label_shape.attr(label_style)
    return final_style


class NodeRenderer:
    """Circle node with an optional centred label."""

    default_radius = 20

    def __init__(self, base_style: Mapping[str, Any] = NODE_BASE_STYLE) -> None:
        self.base_style = dict(base_style)

    def radius(self, model: Mapping[str, Any]) -> float:
        size = model.get("size")
        if not size:
            return self.default_radius
        if isinstance(size, (list, tuple)):
            return size[0] / 2
        return size / 2

    def draw(self, model: Mapping[str, Any], group: ShapeGroup) -> Shape:
        attrs = {"x": 0, "y": 0, "r": self.radius(model)}
        attrs.update(model.get("default_style") or {})
        attrs.update(model.get("style") or {})
        key_shape = group.add_shape("circle", attrs, name=KEY_SHAPE)
        if model.get("label"):
            group.add_shape(
                "text",
                {
                    "x": 0,
                    "y": 0,
                    "textAlign": "center",
                    "textBaseline": "middle",
                    "text": model["label"],
                    "fill": "#000",
                    "fontSize": 12,
                },
                name=LABEL_SHAPE,
            )
        apply_visuals(model, group, self.base_style)
        return key_shape

    def on_after_update(self, item: Item, group: ShapeGroup) -> None:
        model = item.get_model()
        apply_visuals(model, group, self.base_style)
        label_shape = _find(group, LABEL_SHAPE)
        if label_shape is not None and model.get("label") is not None:
            label_shape.attr({"text": model["label"]})


class EdgeRenderer:
    """Styles an edge whose path geometry the host draws."""

    def __init__(self, base_style: Mapping[str, Any] = EDGE_BASE_STYLE) -> None:
        self.base_style = dict(base_style)

    def draw(self, model: Mapping[str, Any], group: ShapeGroup) -> None:
        apply_visuals(model, group, self.base_style)

    def on_after_update(self, item: Item, group: ShapeGroup) -> None:
        apply_visuals(item.get_model(), group, self.base_style)
