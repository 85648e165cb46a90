"""
Interaction strategies for the crop editor.

This package implements the Strategy pattern for the two crop interactions
(move vs resize), allowing clean separation of logic.
"""

from .abstract import InteractionStrategy
from .pan_strategy import PanStrategy
from .resize_strategy import ResizeStrategy

__all__ = [
    "InteractionStrategy",
    "PanStrategy",
    "ResizeStrategy",
]
