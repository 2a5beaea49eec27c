"""graphstate: layered visual states and cancellable path-trace animations for graphs."""

from importlib.metadata import version as _version

__version__ = _version("graphstate")

from graphstate.registry import StateDefinition, StyleRegistry
from graphstate.store import StateChange, StateStore
from graphstate.resolver import resolve_style
from graphstate.blend import BLEND_MODES
from graphstate.theme import Layer, THEME
from graphstate.batching import paint_batch, batched
from graphstate.adapter import RendererAdapter, apply_states
from graphstate.renderer import EdgeRenderer, NodeRenderer, apply_visuals
from graphstate.sequencer import AnimationSequencer, RunHandle, UndoRecord
# textual bridge NOT auto-imported — opt-in only

__all__ = [
    "StateDefinition",
    "StyleRegistry",
    "StateChange",
    "StateStore",
    "resolve_style",
    "BLEND_MODES",
    "Layer",
    "THEME",
    "paint_batch",
    "batched",
    "RendererAdapter",
    "apply_states",
    "EdgeRenderer",
    "NodeRenderer",
    "apply_visuals",
    "AnimationSequencer",
    "RunHandle",
    "UndoRecord",
]
