"""Dynamic style registry — state name -> {priority, style} definitions.

Definitions are declared on demand (when a caller activates a state it wants
to define inline) or up front via register_state(). They outlive the
activations that use them: an entry is replaced by key, never merged, and is
only ever removed by an explicit clear().

A registry is a plain object owned by a StateStore. Several stores can share
one registry, or each graph can keep its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping


@dataclass(frozen=True)
class StateDefinition:
    """Priority and style delta for one named state."""

    priority: float = 0
    style: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(cls, config: StateDefinition | Mapping[str, Any]) -> StateDefinition:
        """Build a definition from a StateDefinition or a plain mapping.

        Mappings may spell the priority as ``priority`` or ``layer``.
        """
        if isinstance(config, StateDefinition):
            return config
        priority = config.get("priority", config.get("layer", 0))
        return cls(priority=priority or 0, style=dict(config.get("style") or {}))


class StyleRegistry:
    """Upsert-only table of dynamically declared state definitions."""

    def __init__(self, definitions: Mapping[str, Any] | None = None) -> None:
        self._definitions: dict[str, StateDefinition] = {}
        if definitions:
            for state, config in definitions.items():
                self.upsert(state, config)

    def upsert(self, state: str, config: StateDefinition | Mapping[str, Any]) -> None:
        """Insert or replace the whole definition for state."""
        self._definitions[state] = StateDefinition.coerce(config)

    def get(self, state: str, default: StateDefinition | None = None) -> StateDefinition | None:
        return self._definitions.get(state, default)

    def priority_of(self, state: str) -> float | None:
        definition = self._definitions.get(state)
        return definition.priority if definition is not None else None

    def style_of(self, state: str) -> Mapping[str, Any] | None:
        definition = self._definitions.get(state)
        return definition.style if definition is not None else None

    def snapshot(self) -> dict[str, StateDefinition]:
        """Copy of the table; later upserts do not show through."""
        return dict(self._definitions)

    def view(self) -> Mapping[str, StateDefinition]:
        """Read-only live view of the table."""
        return MappingProxyType(self._definitions)

    def clear(self) -> None:
        self._definitions.clear()

    def __contains__(self, state: object) -> bool:
        return state in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __repr__(self) -> str:
        return f"StyleRegistry({sorted(self._definitions)!r})"
