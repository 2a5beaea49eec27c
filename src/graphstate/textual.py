"""Textual integration for graphstate. Opt-in — requires textual.

Refreshes requested by a sequencer running on the app's event loop, or from
a worker thread, go through here so widget queries only happen while the
widget tree is queryable. Textual coupling stays in this module; the rest of
the package never imports textual.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterable

from textual.css.query import NoMatches

from graphstate.adapter import RendererAdapter, apply_states
from graphstate.store import StateStore

# Pause depth per app, keyed by id(app). Present <-> inside at least one pause().
_pause_depths: dict[int, int] = {}


@contextmanager
def pause(app):
    """Hold back refreshes while the graph view's widgets are rebuilt.

    Pauses nest: a screen swap during a view rebuild keeps refreshes held
    until the outermost pause exits.
    """
    key = id(app)
    _pause_depths[key] = _pause_depths.get(key, 0) + 1
    try:
        yield
    finally:
        depth = _pause_depths.pop(key, 1) - 1
        if depth > 0:
            _pause_depths[key] = depth


def is_safe(app) -> bool:
    """Can a refresh query the graph view right now?"""
    return app.is_running and id(app) not in _pause_depths


def refresher(app, store: StateStore, adapter: RendererAdapter):
    """Build a refresh callable for AnimationSequencer(refresh=...).

    Skips while the app is paused or not running, swallows NoMatches from
    widget queries, and marshals calls from other threads via
    app.call_from_thread.

    Usage:
        sequencer = AnimationSequencer(
            store, graph_view, refresh=refresher(app, store, graph_view)
        )
    """
    _main = threading.get_ident()

    def _guarded(ids: Iterable[Hashable]) -> None:
        if not is_safe(app):
            return
        ids = list(ids)
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, ids)
        else:
            _safe(ids)

    def _safe(ids: list) -> None:
        try:
            apply_states(store, adapter, ids)
        except NoMatches:
            pass

    return _guarded
