"""Paint batching — apply many item updates, repaint once.

Inside paint_batch(adapter) auto-paint is off. When the outermost batch for
that adapter exits, the adapter paints once and auto-paint is switched back
on. Nested batches (a full refresh that triggers partial ones) only paint at
the very end.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, ParamSpec, TypeVar

if TYPE_CHECKING:
    from graphstate.adapter import RendererAdapter

P = ParamSpec("P")
R = TypeVar("R")

# Batch depth per adapter, keyed by id(adapter). Present <-> inside a batch.
_depths: dict[int, int] = {}


def _begin(adapter: RendererAdapter) -> None:
    key = id(adapter)
    depth = _depths.get(key, 0)
    if depth == 0:
        adapter.set_auto_paint(False)
    _depths[key] = depth + 1


def _end(adapter: RendererAdapter) -> None:
    key = id(adapter)
    depth = _depths.get(key, 1) - 1
    if depth > 0:
        _depths[key] = depth
        return
    _depths.pop(key, None)
    try:
        adapter.paint()
    finally:
        adapter.set_auto_paint(True)


def in_batch(adapter: RendererAdapter) -> bool:
    return id(adapter) in _depths


@contextmanager
def paint_batch(adapter: RendererAdapter) -> Iterator[RendererAdapter]:
    """Context manager for batched item updates.

    Usage:
        with paint_batch(graph):
            graph.update_item(a, {...})
            graph.update_item(b, {...})
            # one paint() here, after both updates
    """
    _begin(adapter)
    try:
        yield adapter
    finally:
        _end(adapter)


def batched(get_adapter: Callable[..., RendererAdapter]):
    """Decorator: run the wrapped function inside paint_batch().

    get_adapter receives the call's arguments and returns the adapter to batch.

    Usage:
        @batched(lambda self, *_: self.graph)
        def highlight_all(self, ids): ...
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with paint_batch(get_adapter(*args, **kwargs)):
                return fn(*args, **kwargs)

        return wrapper

    return decorator
