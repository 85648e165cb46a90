"""Default configuration values for gridcutter."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Grid geometry
# ---------------------------------------------------------------------------

# Smallest edge a center-line cell may have, in source pixels.
MIN_CELL_SIZE: Final[int] = 10
DEFAULT_CELL_SIZE: Final[int] = 100

# Row/column inputs in the UI are bounded to this range. The layout model
# itself accepts any positive count.
MAX_GRID_DIMENSION: Final[int] = 20

# A dragged center line can never get closer than this to the image edge.
LINE_EDGE_INSET: Final[float] = 10.0

# ``auto_calculate_cell_size`` keeps this fraction of the smallest gap so
# neighbouring cells never touch.
AUTO_SIZE_MARGIN: Final[float] = 0.95

# ---------------------------------------------------------------------------
# Hit testing
# ---------------------------------------------------------------------------

LINE_HIT_TOLERANCE: Final[float] = 15.0
HANDLE_HIT_TOLERANCE: Final[float] = 12.0

# ---------------------------------------------------------------------------
# Crop editor
# ---------------------------------------------------------------------------

MIN_CROP_SIZE: Final[float] = 20.0
CROP_EDITOR_MAX_WIDTH: Final[int] = 800
CROP_EDITOR_MAX_HEIGHT: Final[int] = 600

# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

RENDER_FRAME_INTERVAL_MS: Final[int] = 16
POINTER_THROTTLE_MS: Final[int] = 16
PREVIEW_DEBOUNCE_MS: Final[int] = 200

# ---------------------------------------------------------------------------
# Main viewport
# ---------------------------------------------------------------------------

# Horizontal padding the canvas container keeps around the image and the
# fixed canvas height used when fitting a freshly loaded image.
VIEWPORT_PADDING: Final[int] = 40
VIEWPORT_MAX_HEIGHT: Final[int] = 600

# ---------------------------------------------------------------------------
# Preview and export
# ---------------------------------------------------------------------------

PREVIEW_MAX_SIZE: Final[int] = 100
PREVIEW_MAX_COLUMNS: Final[int] = 4
DEFAULT_EXPORT_PREFIX: Final[str] = "emoji"
DEFAULT_EXPORT_FORMAT: Final[str] = "png"
EXPORT_FORMATS: Final[tuple[str, ...]] = ("png", "jpeg", "webp")
