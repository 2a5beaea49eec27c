"""Style resolution — layer active states over a base style.

resolve_style() is pure: states are ordered by priority (low -> high, stable
for ties), each state's delta is folded into a copy of the base style, and
attributes with a blend mode are combined instead of overwritten.

Priority lookup: explicit priorities -> dynamic definitions -> theme -> 0.
Style lookup: per-item state_styles -> dynamic definitions -> skip.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from graphstate.blend import blend
from graphstate.registry import StateDefinition
from graphstate.theme import PRIORITY


def state_priority(
    state: str,
    priorities: Mapping[str, float] | None = None,
    definitions: Mapping[str, StateDefinition] | None = None,
) -> float:
    if priorities and state in priorities:
        return priorities[state]
    if definitions is not None:
        definition = definitions.get(state)
        if definition is not None:
            return definition.priority
    return PRIORITY.get(state, 0)


def resolve_style(
    base_style: Mapping[str, Any],
    state_styles: Mapping[str, Mapping[str, Any]] | None,
    active_states: Iterable[str],
    priorities: Mapping[str, float] | None = None,
    *,
    definitions: Mapping[str, StateDefinition] | None = None,
) -> dict[str, Any]:
    """Compute the final style for one item.

    Usage:
        resolve_style(
            {"lineWidth": 1},
            {"selected": {"lineWidth": 3}, "focus": {"lineWidth": 6}},
            ["focus", "selected"],
            {"selected": 10, "focus": 20},
        )
        # {"lineWidth": 6}
    """
    state_styles = state_styles or {}
    # sorted() is stable, so equal priorities keep their input order
    ordered = sorted(
        active_states,
        key=lambda state: state_priority(state, priorities, definitions),
    )

    final_style = dict(base_style)
    for state in ordered:
        delta = state_styles.get(state)
        if delta is None and definitions is not None:
            definition = definitions.get(state)
            delta = definition.style if definition is not None else None
        if not delta:
            continue
        for key, value in delta.items():
            final_style[key] = blend(key, final_style.get(key), value)
    return final_style
