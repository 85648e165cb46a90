"""
Preview thumbnails and the export plan.

Previews are derived from the effective areas after every debounced change.
The export plan is the ordered list of crop boxes and filenames a writer
needs; writing the files or an archive happens elsewhere.
"""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass

from PIL import Image

from ..config import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_EXPORT_PREFIX,
    EXPORT_FORMATS,
    PREVIEW_MAX_COLUMNS,
    PREVIEW_MAX_SIZE,
)
from .state import LayoutState
from .types import CellIndex, CropArea

_LOGGER = logging.getLogger(__name__)

PREVIEW_JPEG_QUALITY = 60


def preview_size(area: CropArea, max_size: int = PREVIEW_MAX_SIZE) -> tuple[int, int]:
    """Return the thumbnail size for *area*, shrinking only, never below 1 px."""
    if area.width <= 0 or area.height <= 0:
        return (1, 1)
    bounded_w = min(area.width, float(max_size))
    bounded_h = min(area.height, float(max_size))
    scale = min(bounded_w / area.width, bounded_h / area.height)
    return (
        max(1, int(math.floor(area.width * scale))),
        max(1, int(math.floor(area.height * scale))),
    )


def preview_columns(cols: int) -> int:
    """Return how many columns the preview strip uses for a grid of *cols*."""
    return max(1, min(int(cols), PREVIEW_MAX_COLUMNS))


@dataclass(frozen=True)
class PreviewItem:
    """One cell of the preview strip.

    ``thumbnail`` holds JPEG bytes for enabled cells when a decoded image was
    supplied; disabled cells never get one.
    """

    index: CellIndex
    area: CropArea
    disabled: bool
    size: tuple[int, int]
    thumbnail: bytes | None = None

    @property
    def label(self) -> str:
        return str(int(self.index) + 1)


def render_thumbnail(image: Image.Image, area: CropArea, size: tuple[int, int]) -> bytes:
    """Crop *area* out of *image*, scale it to *size* and encode it as JPEG."""
    region = image.crop(area.crop_box())
    if region.mode != "RGB":
        region = region.convert("RGB")
    region = region.resize(size, Image.Resampling.LANCZOS)
    with io.BytesIO() as buffer:
        region.save(buffer, format="JPEG", quality=PREVIEW_JPEG_QUALITY)
        return buffer.getvalue()


def build_previews(
    state: LayoutState,
    image: Image.Image | None = None,
    max_size: int = PREVIEW_MAX_SIZE,
) -> list[PreviewItem]:
    """Return one preview entry per cell in index order."""
    disabled = state.disabled_indices()
    items: list[PreviewItem] = []
    for index, area in enumerate(state.effective_areas()):
        cell = CellIndex(index)
        is_disabled = cell in disabled
        size = preview_size(area, max_size)
        thumbnail = None
        if image is not None and not is_disabled:
            thumbnail = render_thumbnail(image, area, size)
        items.append(PreviewItem(cell, area, is_disabled, size, thumbnail))
    _LOGGER.debug("Built %d previews (%d disabled)", len(items), len(disabled))
    return items


@dataclass(frozen=True)
class ExportItem:
    """A single file the export writer produces."""

    index: CellIndex
    filename: str
    area: CropArea
    box: tuple[int, int, int, int]


def normalise_format(fmt: str) -> str:
    """Return the lower-case export format, mapping ``jpg`` to ``jpeg``.

    Raises
    ------
    ValueError
        If *fmt* is not one of the supported export formats.
    """
    value = fmt.strip().lower()
    if value == "jpg":
        value = "jpeg"
    if value not in EXPORT_FORMATS:
        raise ValueError(
            f"unsupported export format {fmt!r}; expected one of {', '.join(EXPORT_FORMATS)}"
        )
    return value


def export_plan(
    state: LayoutState,
    prefix: str = DEFAULT_EXPORT_PREFIX,
    fmt: str = DEFAULT_EXPORT_FORMAT,
) -> list[ExportItem]:
    """Return the enabled cells as ``{prefix}_{index + 1}.{fmt}`` entries.

    Numbering follows the cell index, so disabled cells leave gaps.
    """
    prefix = prefix.strip() or DEFAULT_EXPORT_PREFIX
    fmt = normalise_format(fmt)
    disabled = state.disabled_indices()
    return [
        ExportItem(
            CellIndex(index),
            f"{prefix}_{index + 1}.{fmt}",
            area,
            area.crop_box(),
        )
        for index, area in enumerate(state.effective_areas())
        if CellIndex(index) not in disabled
    ]


__all__ = [
    "ExportItem",
    "PreviewItem",
    "build_previews",
    "export_plan",
    "normalise_format",
    "preview_columns",
    "preview_size",
    "render_thumbnail",
]
