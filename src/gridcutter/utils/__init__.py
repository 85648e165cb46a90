"""Utility helpers for gridcutter."""
