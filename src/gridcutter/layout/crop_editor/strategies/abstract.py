"""
Abstract base class for crop editor interaction strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from PySide6.QtCore import QPointF


class InteractionStrategy(ABC):
    """Base class for crop editor strategies (move, resize)."""

    @abstractmethod
    def on_drag(self, delta_view: QPointF) -> None:
        """Handle drag movement in editor display coordinates.

        Parameters
        ----------
        delta_view:
            Pointer movement since the previous event, in editor pixels.
        """

    @abstractmethod
    def on_end(self) -> None:
        """Handle end of interaction (pointer release)."""
