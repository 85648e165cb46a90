"""
Grid and crop-region layout engine.

This package computes cell geometry for the uniform and center-line grid
models, hit-tests the canvas and the crop editor, and drives the pointer
interactions that mutate the shared :class:`LayoutState`.
"""

from .types import (
    CellIndex,
    CenterLineGrid,
    CropArea,
    GridMode,
    GridSpec,
    ImageExtent,
    LineAxis,
    LineRef,
    UniformGrid,
)
from .state import GridSummary, LayoutState
from .crop_editor import CropEditorController, CropEditorSession, CropHandle
from .hit_tester import HitTester
from .scheduler import PointerThrottle, UpdateScheduler
from .controller import GridInteractionController, InteractionState, PointerEvent, PointerKind
from .render import GridStyle, RenderAdapter, RenderSnapshot, build_snapshot, paint
from .preview import ExportItem, PreviewItem, build_previews, export_plan

__all__ = [
    "CellIndex",
    "CenterLineGrid",
    "CropArea",
    "CropEditorController",
    "CropEditorSession",
    "CropHandle",
    "ExportItem",
    "GridInteractionController",
    "GridMode",
    "GridSpec",
    "GridStyle",
    "GridSummary",
    "HitTester",
    "ImageExtent",
    "InteractionState",
    "LayoutState",
    "LineAxis",
    "LineRef",
    "PointerEvent",
    "PointerKind",
    "PointerThrottle",
    "PreviewItem",
    "RenderAdapter",
    "RenderSnapshot",
    "UniformGrid",
    "UpdateScheduler",
    "build_previews",
    "build_snapshot",
    "export_plan",
    "paint",
]
