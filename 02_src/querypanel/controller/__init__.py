"""Panel controller module."""

from .controller import QUERY_INPUT_SLICES, IPanelController, PanelController

__all__ = ["IPanelController", "PanelController", "QUERY_INPUT_SLICES"]
