"""
Walkability grid construction.

The grid is a boolean numpy array of shape (height, width) indexed as
grid[y, x]; True means walkable. The base grid built here is frozen
(read-only) and shared by every request, working copies come from
clone_grid().
"""

import logging

import numpy as np

from ..models.geometry import CorridorModel, Rect

logger = logging.getLogger(__name__)


def _clamped_bounds(rect: Rect, width: int, height: int):
    """Clip a corridor to the plane. Returns None if nothing is left."""
    x1 = max(0, rect.x1)
    y1 = max(0, rect.y1)
    x2 = min(width - 1, rect.x2)
    y2 = min(height - 1, rect.y2)
    if x1 > x2 or y1 > y2:
        return None
    return x1, y1, x2, y2


def build_grid(model: CorridorModel) -> np.ndarray:
    """
    Materialize the walkability grid for a corridor model.

    Every cell starts blocked; each corridor, in list order, marks its
    clamped cells walkable. Corridors only ever add walkable cells.

    Args:
        model: Corridor model with plane dimensions

    Returns:
        Read-only boolean array of shape (height, width)
    """
    grid = np.zeros((model.height, model.width), dtype=bool)

    for rect in model.corridors:
        bounds = _clamped_bounds(rect, model.width, model.height)
        if bounds is None:
            logger.warning(f"Corridor {rect.name or rect} lies entirely outside the plane, skipped")
            continue
        x1, y1, x2, y2 = bounds
        grid[y1:y2 + 1, x1:x2 + 1] = True

    grid.setflags(write=False)
    logger.info(
        f"Built {model.width}x{model.height} grid from {len(model.corridors)} corridors "
        f"({int(grid.sum())} walkable cells)"
    )
    return grid


def clone_grid(grid: np.ndarray) -> np.ndarray:
    """Full, writable copy of a grid. Never aliases the source."""
    return np.array(grid, dtype=bool, copy=True)


def is_walkable(grid: np.ndarray, x: int, y: int) -> bool:
    height, width = grid.shape
    return 0 <= x < width and 0 <= y < height and bool(grid[y, x])
