"""AnimationSequencer — timed, cancellable, undoable state sequences.

A path trace lights up a path one step at a time: the source immediately,
then each connecting edge and interior node after a fixed delay, the target
last. Every step is an await on the injected sleep; that is the only place a
run suspends.

Each run owns a reason id and a RunHandle. Before the first step the run
pushes an UndoRecord onto the timeline, so undo_last() can always stop an
in-flight run: the undo cancels the handle, withdraws the run's reasons and
refreshes what it touched. Steps that wake up after cancellation see the
cancelled handle and exit without touching the store.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Hashable, Iterable, Sequence

from graphstate.adapter import RendererAdapter, apply_states
from graphstate.store import StateStore
from graphstate.theme import HIGHLIGHT_SOURCE, HIGHLIGHT_TARGET, PATH_ACTIVE, TRACE_STATES

logger = logging.getLogger("graphstate.sequencer")

DEFAULT_STEP_DELAY = 0.3

# itertools.count is atomic under the GIL; the counter keeps ids distinct
# when two runs start within the same clock tick.
_run_counter = itertools.count(1)


def new_reason_id(prefix: str = "trace") -> str:
    return f"{prefix}_{time.time_ns()}_{next(_run_counter)}"


def _present(item_id: Hashable | None) -> bool:
    return item_id is not None and item_id != ""


def _at(ids: Sequence[Hashable | None] | None, index: int) -> Hashable | None:
    if ids is None or index < 0 or index >= len(ids):
        return None
    return ids[index]


class RunHandle:
    """Run control token shared by every step of one run."""

    __slots__ = ("reason_id", "_cancelled", "_completed")

    def __init__(self, reason_id: str) -> None:
        self.reason_id = reason_id
        self._cancelled = False
        self._completed = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def completed(self) -> bool:
        """True once every step has been applied."""
        return self._completed

    def cancel(self) -> None:
        """Turn all not-yet-applied steps of the run into no-ops."""
        self._cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "completed" if self._completed else "active"
        return f"RunHandle({self.reason_id!r}, {state})"


@dataclass
class UndoRecord:
    id: str
    undo: Callable[[], None]


def path_trace_steps(
    path_nodes: Sequence[Hashable | None], path_edges: Sequence[Hashable | None] | None
) -> list[tuple[Hashable, str]]:
    """The delayed steps of a path trace, in order, as (id, state) pairs.

    The source is not included: it is highlighted immediately. Missing ids
    produce no step.
    """
    interior = path_nodes[1:-1]
    steps: list[tuple[Hashable | None, str]] = [(_at(path_edges, 0), PATH_ACTIVE)]
    for i, node_id in enumerate(interior):
        steps.append((node_id, PATH_ACTIVE))
        steps.append((_at(path_edges, i + 1), PATH_ACTIVE))
    steps.append((path_nodes[-1], HIGHLIGHT_TARGET))
    return [(item_id, state) for item_id, state in steps if _present(item_id)]


class AnimationSequencer:
    """Plays path traces against a StateStore and keeps an undo timeline."""

    def __init__(
        self,
        store: StateStore,
        adapter: RendererAdapter | None = None,
        *,
        step_delay: float = DEFAULT_STEP_DELAY,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        refresh: Callable[[list], object] | None = None,
    ) -> None:
        self.store = store
        self.adapter = adapter
        self.step_delay = step_delay
        self._sleep = sleep
        self._refresh = refresh
        self._timeline: list[UndoRecord] = []
        # Only needed when the timeline is shared across real threads
        self._timeline_lock = threading.Lock()

    @property
    def timeline(self) -> tuple[UndoRecord, ...]:
        with self._timeline_lock:
            return tuple(self._timeline)

    def push(self, record: UndoRecord) -> None:
        with self._timeline_lock:
            self._timeline.append(record)

    def undo_last(self) -> UndoRecord | None:
        """Undo the most recently started operation. No-op on an empty timeline."""
        with self._timeline_lock:
            record = self._timeline.pop() if self._timeline else None
        if record is None:
            return None
        logger.info("Undoing %s", record.id)
        record.undo()
        return record

    async def play_path_trace(
        self,
        path_nodes: Sequence[Hashable | None],
        path_edges: Sequence[Hashable | None] | None = None,
    ) -> RunHandle:
        """Highlight a path step by step. Returns once the run finished or was cancelled.

        Raises ValueError for an empty path, before anything is recorded.
        """
        if not path_nodes:
            raise ValueError("path trace needs at least one node")

        path_nodes = list(path_nodes)
        path_edges = list(path_edges) if path_edges else []
        handle = RunHandle(new_reason_id())
        touched = [
            item_id for item_id in dict.fromkeys(path_nodes + path_edges) if _present(item_id)
        ]

        def undo() -> None:
            handle.cancel()
            for item_id in touched:
                for state in TRACE_STATES:
                    self.store.remove_reason(item_id, state, handle.reason_id)
            self.refresh(touched)

        self.push(UndoRecord(handle.reason_id, undo))
        logger.info(
            "Path trace %s started: %d nodes, %d edges",
            handle.reason_id, len(path_nodes), len(path_edges),
        )

        source = path_nodes[0]
        if _present(source):
            self.store.add_reason(source, HIGHLIGHT_SOURCE, handle.reason_id)
            self.refresh([source])

        for item_id, state in path_trace_steps(path_nodes, path_edges):
            await self._sleep(self.step_delay)
            if handle.cancelled:
                logger.debug("Path trace %s cancelled before %s on %r", handle.reason_id, state, item_id)
                return handle
            self.store.add_reason(item_id, state, handle.reason_id)
            self.refresh([item_id])

        handle._completed = True
        logger.info("Path trace %s finished", handle.reason_id)
        return handle

    def refresh(self, ids: Iterable[Hashable | None]) -> None:
        """Partial refresh: push state for ids to the renderer."""
        ids = list(ids)
        if self._refresh is not None:
            self._refresh(ids)
        elif self.adapter is not None:
            apply_states(self.store, self.adapter, ids)

    def refresh_all(self) -> None:
        """Refresh every node and edge. Required after a global state change."""
        if self.adapter is None:
            return
        ids = [node.get_id() for node in self.adapter.get_nodes()]
        ids.extend(edge.get_id() for edge in self.adapter.get_edges())
        self.refresh(ids)
