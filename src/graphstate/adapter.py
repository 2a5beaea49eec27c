"""Renderer adapter contract and the state -> item bridge.

The rendering surface (shapes, hit-testing, layout, paint scheduling) lives
outside this package. It is reached through the small RendererAdapter
protocol below; apply_states() pushes the store's view of each touched item
into that item's model, and the item renderer (graphstate.renderer) turns the
model into attributes on the drawable.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Hashable, Iterable, Mapping, Protocol, Sequence

from graphstate.batching import batched
from graphstate.registry import StateDefinition
from graphstate.theme import THEME

if TYPE_CHECKING:
    from graphstate.store import StateStore

logger = logging.getLogger("graphstate.adapter")


class Item(Protocol):
    def get_id(self) -> Hashable: ...

    def get_model(self) -> Mapping[str, Any]: ...


class RendererAdapter(Protocol):
    """What the core needs from a graph rendering surface."""

    def find_by_id(self, item_id: Hashable) -> Item | None: ...

    def update_item(self, item: Item, patch: Mapping[str, Any]) -> None:
        """Merge patch into the item's model. Does not repaint by itself."""

    def set_auto_paint(self, enabled: bool) -> None: ...

    def paint(self) -> None: ...

    def get_nodes(self) -> Sequence[Item]: ...

    def get_edges(self) -> Sequence[Item]: ...


class Shape(Protocol):
    kind: str
    name: str | None

    def attr(self, attrs: Mapping[str, Any]) -> None: ...


class ShapeGroup(Protocol):
    def children(self) -> Sequence[Shape]: ...

    def add_shape(self, kind: str, attrs: Mapping[str, Any], name: str | None = None) -> Shape: ...


class ItemRenderer(Protocol):
    """Strategy the host invokes for one item type."""

    def draw(self, model: Mapping[str, Any], group: ShapeGroup) -> Shape | None: ...

    def on_after_update(self, item: Item, group: ShapeGroup) -> None: ...


def state_definitions(store: StateStore) -> dict[str, StateDefinition]:
    """Theme definitions overlaid by the store's dynamic definitions."""
    definitions = dict(THEME)
    definitions.update(store.get_dynamic_definitions())
    return definitions


def build_patch(
    store: StateStore,
    item_id: Hashable,
    definitions: Mapping[str, StateDefinition] | None = None,
) -> dict[str, Any]:
    """Model patch carrying everything an item renderer needs to recompute.

    The shared definitions travel under their own key. An item's own
    state_styles and state_priorities are never part of the patch, so
    per-item overrides survive every refresh and keep precedence.
    """
    if definitions is None:
        definitions = state_definitions(store)
    return {
        "active_states": store.get_active_states(item_id),
        "state_definitions": definitions,
    }


def _unique(ids: Iterable[Hashable | None]) -> list[Hashable]:
    # dict keeps first-seen order; falsy ids are placeholders for missing items
    return list(dict.fromkeys(i for i in ids if i is not None and i != ""))


@batched(lambda store, adapter, ids: adapter)
def apply_states(
    store: StateStore, adapter: RendererAdapter, ids: Iterable[Hashable | None]
) -> int:
    """Push current active states for ids into their items, painting once.

    Unknown or missing ids are skipped. Returns the number of items updated.
    """
    definitions = state_definitions(store)
    updated = 0
    for item_id in _unique(ids):
        item = adapter.find_by_id(item_id)
        if item is None:
            logger.debug("Skipping refresh of unknown item %r", item_id)
            continue
        patch = build_patch(store, item_id, definitions)
        adapter.update_item(item, patch)
        logger.debug("Refreshed %r: %s", item_id, patch["active_states"])
        updated += 1
    return updated
