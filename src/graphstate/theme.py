"""Built-in theme — semantic layers, default state styles, base styles.

Each theme entry carries a layer (its priority when several states are
active) and a style delta. PRIORITY and STATE_STYLES are derived from THEME
so the two never drift apart.
"""

from __future__ import annotations

from graphstate.registry import StateDefinition

# Nested style fragment applied to an item's label shape.
LABEL_KEY = "label"

# Path-trace states
HIGHLIGHT_SOURCE = "highlight_source"
HIGHLIGHT_TARGET = "highlight_target"
PATH_ACTIVE = "path_active"
TRACE_STATES = (HIGHLIGHT_SOURCE, HIGHLIGHT_TARGET, PATH_ACTIVE)


class Layer:
    """Abstract priority bands. Business states pick a band, not a number."""

    TOP_MOST = 100     # loading, error
    INTERACTION = 80   # tooltip, focus
    HIGHLIGHT = 60     # search result, path trace
    SELECTION = 40
    DECORATION = 20    # neighbour, badge
    BASE = 0


THEME: dict[str, StateDefinition] = {
    "hidden": StateDefinition(
        Layer.TOP_MOST,
        {"opacity": 0, "stroke": "transparent"},
    ),
    "critical": StateDefinition(
        Layer.TOP_MOST - 10,
        {
            "fill": "#EF4444",
            "stroke": "#7F1D1D",
            "shadowColor": "#EF4444",
            "shadowBlur": 15,
            LABEL_KEY: {"fill": "#fff", "fontWeight": "bold"},
        },
    ),
    "disabled": StateDefinition(
        Layer.INTERACTION,
        {"opacity": 0.3, "fill": "#555", "cursor": "not-allowed"},
    ),
    "highlight": StateDefinition(
        Layer.HIGHLIGHT,
        {"stroke": "#00D1FF", "lineWidth": 4, "shadowColor": "#00D1FF", "shadowBlur": 10},
    ),
    HIGHLIGHT_SOURCE: StateDefinition(
        Layer.HIGHLIGHT + 5,
        {
            "fill": "#10B981",
            "stroke": "#059669",
            "lineWidth": 6,
            "shadowColor": "#10B981",
            "shadowBlur": 20,
        },
    ),
    HIGHLIGHT_TARGET: StateDefinition(
        Layer.HIGHLIGHT + 5,
        {
            "fill": "#F59E0B",
            "stroke": "#D97706",
            "lineWidth": 6,
            "shadowColor": "#F59E0B",
            "shadowBlur": 20,
        },
    ),
    PATH_ACTIVE: StateDefinition(
        Layer.HIGHLIGHT - 5,
        {"stroke": "#EC4899", "lineWidth": 4, "shadowColor": "#EC4899", "shadowBlur": 10},
    ),
    "selected": StateDefinition(
        Layer.SELECTION,
        {"stroke": "#00D1FF", "lineWidth": 4, "shadowColor": "#00D1FF", "shadowBlur": 10},
    ),
    "related": StateDefinition(
        Layer.DECORATION,
        {"stroke": "#A855F7", "lineWidth": 4, "lineDash": [5, 5]},
    ),
    "hover": StateDefinition(
        Layer.DECORATION - 5,
        {"stroke": "#999", "cursor": "pointer"},
    ),
    "default": StateDefinition(Layer.BASE, {}),
}

PRIORITY: dict[str, float] = {state: d.priority for state, d in THEME.items()}
STATE_STYLES: dict[str, dict] = {state: dict(d.style) for state, d in THEME.items()}

# Factory settings for every node; keeps stale state styles from surviving.
NODE_BASE_STYLE: dict = {
    "fill": "#C6E5FF",
    "stroke": "#5B8FF9",
    "lineWidth": 1,
    "opacity": 1,
    "shadowBlur": 0,
    "shadowColor": None,
    "cursor": "pointer",
}

EDGE_BASE_STYLE: dict = {"stroke": "#999", "lineWidth": 2}

# Labels inherit nothing from the key shape: a transparent stroke and zeroed
# shadow keep a highlighted node's glow from turning its text faux-bold.
LABEL_BASE_STYLE: dict = {
    "fill": "#000",
    "stroke": "rgba(0,0,0,0)",
    "lineWidth": 0,
    "shadowBlur": 0,
    "shadowColor": None,
    "shadowOffsetX": 0,
    "shadowOffsetY": 0,
    "fontSize": 12,
    "fontWeight": "normal",
    "opacity": 1,
    "cursor": "pointer",
}
