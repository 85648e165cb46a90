"""Slice an image into a grid of cells and plan the surviving crops."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
