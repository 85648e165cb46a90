"""Read image dimensions without decoding pixel data."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..errors import ImageProbeError
from ..layout.types import ImageExtent

LOGGER = logging.getLogger(__name__)


def probe_extent(path: Path) -> ImageExtent:
    """Return the pixel size of the image at *path*.

    Raises
    ------
    ImageProbeError
        If the file is missing or Pillow cannot identify it.
    """
    LOGGER.debug("Opening %s with Pillow to read its size", path)
    try:
        with Image.open(path) as img:
            return ImageExtent(img.width, img.height)
    except UnidentifiedImageError as exc:
        raise ImageProbeError(f"Unable to identify image {path}") from exc
    except OSError as exc:
        raise ImageProbeError(f"OS error while reading {path}: {exc}") from exc


def parse_size(text: str) -> ImageExtent:
    """Parse a ``WIDTHxHEIGHT`` string such as ``1200x800``.

    Raises
    ------
    ValueError
        If *text* is not two positive integers separated by ``x``.
    """
    parts = text.lower().replace("×", "x").split("x")
    if len(parts) != 2:
        raise ValueError(f"expected WIDTHxHEIGHT, got {text!r}")
    try:
        width, height = (int(part.strip()) for part in parts)
    except ValueError as exc:
        raise ValueError(f"expected WIDTHxHEIGHT, got {text!r}") from exc
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {text!r}")
    return ImageExtent(width, height)


__all__ = ["parse_size", "probe_extent"]
