"""StateStore — which states are active on which entity, and why.

Every activation is a (state, reason) pair. A state is active on an entity
while at least one reason asserts it, either on that entity or globally.
Reasons are a set: adding the same reason twice is a no-op, and removing an
absent one is too. Nothing here raises on unknown ids; an unknown id is
simply an entity with no active states.

Global changes touch every entity, so after add_global_reason() or
remove_global_reason() the caller is expected to run a full refresh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterator, Mapping

from graphstate.registry import StateDefinition, StyleRegistry

logger = logging.getLogger("graphstate.store")

EntityId = Hashable
ReasonId = Hashable
Disposer = Callable[[], None]

ADDED = "added"
REMOVED = "removed"
CLEARED = "cleared"


@dataclass(frozen=True)
class StateChange:
    """One effective change to the activation records.

    entity is None for global-scope changes. state and reason are None for
    a bulk clear.
    """

    kind: str
    entity: EntityId | None
    state: str | None = None
    reason: ReasonId | None = None


class StateStore:
    """Per-entity and global reason sets, plus the dynamic style registry."""

    def __init__(self, registry: StyleRegistry | None = None) -> None:
        self._entity_states: dict[EntityId, dict[str, set[ReasonId]]] = {}
        self._global_reasons: dict[str, set[ReasonId]] = {}
        self._subscribers: list[Callable[[StateChange], None]] = []
        self.registry = registry if registry is not None else StyleRegistry()

    # --- Definitions ---

    def register_state(
        self, state: str, config: StateDefinition | Mapping[str, Any] | None
    ) -> None:
        """Declare a state's priority and style ahead of its first activation."""
        if state and config:
            self.registry.upsert(state, config)

    def get_dynamic_definitions(self) -> dict[str, StateDefinition]:
        return self.registry.snapshot()

    # --- Local reasons ---

    def add_reason(
        self,
        entity: EntityId,
        state: str,
        reason: ReasonId,
        config: StateDefinition | Mapping[str, Any] | None = None,
    ) -> None:
        """Assert state on entity for reason; optionally (re)define state's style."""
        reasons = self._entity_states.setdefault(entity, {}).setdefault(state, set())
        changed = reason not in reasons
        reasons.add(reason)
        if config:
            self.registry.upsert(state, config)
        if changed:
            self._emit(StateChange(ADDED, entity, state, reason))

    def remove_reason(self, entity: EntityId, state: str, reason: ReasonId) -> None:
        """Withdraw reason. The state entry is dropped once no reason is left.

        Dynamic definitions are kept: other entities may still use them.
        """
        entity_state = self._entity_states.get(entity)
        if not entity_state or state not in entity_state:
            return
        reasons = entity_state[state]
        if reason not in reasons:
            return
        reasons.discard(reason)
        if not reasons:
            del entity_state[state]
        self._emit(StateChange(REMOVED, entity, state, reason))

    # --- Global reasons ---

    def add_global_reason(self, state: str, reason: ReasonId) -> None:
        """Assert state on every entity. Follow up with a full refresh."""
        reasons = self._global_reasons.setdefault(state, set())
        if reason in reasons:
            return
        reasons.add(reason)
        self._emit(StateChange(ADDED, None, state, reason))

    def remove_global_reason(self, state: str, reason: ReasonId) -> None:
        reasons = self._global_reasons.get(state)
        if reasons is None or reason not in reasons:
            return
        reasons.discard(reason)
        if not reasons:
            del self._global_reasons[state]
        self._emit(StateChange(REMOVED, None, state, reason))

    # --- Queries ---

    def get_active_states(self, entity: EntityId) -> list[str]:
        """Union of globally and locally active states. Order carries no meaning."""
        active = {state: None for state, reasons in self._global_reasons.items() if reasons}
        for state, reasons in self._entity_states.get(entity, {}).items():
            if reasons:
                active[state] = None
        return list(active)

    def has_state(self, entity: EntityId, state: str) -> bool:
        return bool(self._global_reasons.get(state)) or bool(
            self._entity_states.get(entity, {}).get(state)
        )

    def reasons_for(self, entity: EntityId, state: str) -> frozenset:
        """Every reason currently asserting state on entity, global ones included."""
        local = self._entity_states.get(entity, {}).get(state, ())
        return frozenset(local) | frozenset(self._global_reasons.get(state, ()))

    def entities(self) -> Iterator[EntityId]:
        """Ids holding at least one local activation."""
        return (entity for entity, states in self._entity_states.items() if states)

    # --- Cleanup ---

    def clear_node(self, entity: EntityId) -> None:
        """Forget every local activation on entity (e.g. when it is removed)."""
        if self._entity_states.pop(entity, None):
            self._emit(StateChange(CLEARED, entity))

    def clear_all(self) -> None:
        """Reset local and global activations. Definitions are left alone."""
        had_records = any(self._entity_states.values()) or bool(self._global_reasons)
        self._entity_states.clear()
        self._global_reasons.clear()
        logger.debug("Cleared all activation records")
        if had_records:
            self._emit(StateChange(CLEARED, None))

    # --- Notifications ---

    def subscribe(self, callback: Callable[[StateChange], None]) -> Disposer:
        """Call callback after each effective change. Returns a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def _emit(self, change: StateChange) -> None:
        for callback in list(self._subscribers):
            callback(change)

    def __repr__(self) -> str:
        return (
            f"StateStore(entities={len(self._entity_states)}, "
            f"global={sorted(self._global_reasons)!r})"
        )
