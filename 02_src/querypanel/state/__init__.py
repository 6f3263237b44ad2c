"""Shared state module."""

from .reducer import Action, ActionType, PanelState, reduce
from .store import IStore, Slice, StateHandler, Store

__all__ = [
    "Action",
    "ActionType",
    "PanelState",
    "reduce",
    "IStore",
    "Slice",
    "StateHandler",
    "Store",
]
