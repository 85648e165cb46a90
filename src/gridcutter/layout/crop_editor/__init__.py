"""
Crop editor for one grid cell.

This package provides the editing session model, the move/resize
strategies and the controller that wires them to pointer input.
"""

from .utils import HANDLE_ORDER, CropHandle, cursor_for_handle, handle_positions
from .model import CropEditorSession
from .controller import CropEditorController

__all__ = [
    "HANDLE_ORDER",
    "CropEditorController",
    "CropEditorSession",
    "CropHandle",
    "cursor_for_handle",
    "handle_positions",
]
