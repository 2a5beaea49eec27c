"""Per-attribute blend modes used when two style layers set the same key.

Any attribute missing from BLEND_MODES is overwritten by the later
(higher-priority) layer: colours, dash patterns, cursor, fonts.
"""

from __future__ import annotations

from typing import Any, Callable

Blend = Callable[[Any, Any], Any]


def _max(prev, curr):
    return max(prev, curr)


def _multiply_unless_opaque(prev, curr):
    # An explicit 1 always wins; anything else dims multiplicatively.
    return 1 if curr == 1 else prev * curr


def _sum(prev, curr):
    return prev + curr


BLEND_MODES: dict[str, Blend] = {
    # Geometry: the more prominent size wins
    "r": _max,
    "width": _max,
    "height": _max,
    "lineWidth": _max,
    # Visibility
    "opacity": _multiply_unless_opaque,
    "fillOpacity": _multiply_unless_opaque,
    "strokeOpacity": _multiply_unless_opaque,
    # Glow accumulates
    "shadowBlur": _sum,
    "shadowOffsetX": _sum,
    "shadowOffsetY": _sum,
    # Relative nudges
    "x": _sum,
    "y": _sum,
}


def blend(key: str, prev: Any, curr: Any) -> Any:
    """Combine prev and curr for key, overwriting when there is nothing to blend.

    None on either side counts as undefined: a None delta clears the attribute
    instead of being combined with it.
    """
    mode = BLEND_MODES.get(key)
    if mode is None or prev is None or curr is None:
        return curr
    return mode(prev, curr)
