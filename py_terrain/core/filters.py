"""
Post-generation filters.

Filters rewrite the elevation channel of a vertex grid in place. The
normalization pipeline (:func:`normalize_terrain`) runs once after a
heightmap generator: turbulence, terracing with re-smoothing, clamping
with easing, and finally the caller's ``after`` hook.
"""

from typing import Optional

import numpy as np
import structlog
from scipy import ndimage

from .grid import ELEVATION, check_vertex_grid, elevation_grid
from .options import TerrainOptions

logger = structlog.get_logger()

_NEIGHBOURHOOD = np.ones((3, 3))
_NEIGHBOURS_ONLY = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=bool)


def clamp(vertices: np.ndarray, options: TerrainOptions) -> None:
    """
    Rescale elevations into ``[min_height, max_height]``.

    Heights are normalized against the current lowest and highest vertex,
    passed through ``options.easing`` and mapped onto the target window.
    With ``stretch`` the window is the full configured range; without it
    the window is the current extent intersected with the configured range,
    so terrain that already fits is left where it is. Terrain lying wholly
    outside the configured range is squeezed onto the full range.

    Args:
        vertices: Vertex grid
        options: Terrain options (min_height, max_height, stretch, easing)
    """
    heights = vertices[:, ELEVATION]
    lowest = float(heights.min())
    highest = float(heights.max())
    actual_range = highest - lowest

    if options.stretch:
        target_max = options.max_height
        target_min = options.min_height
    else:
        target_max = min(highest, options.max_height)
        target_min = max(lowest, options.min_height)
    if target_max < target_min or (target_max == target_min and actual_range > 0):
        # No overlap with the configured range; fall back to all of it
        target_max = options.max_height
        target_min = options.min_height
    target_range = target_max - target_min

    if actual_range > 0:
        position = (heights - lowest) / actual_range
    else:
        # Flat terrain has no extent to normalize against
        position = np.zeros_like(heights)

    vertices[:, ELEVATION] = options.easing(position) * target_range + target_min


def turbulence(vertices: np.ndarray, options: TerrainOptions) -> None:
    """
    Fold elevations about the middle of the height range.

    Low and high areas both become high and the middle band becomes a
    network of ridged valleys.
    """
    height_range = options.height_range
    heights = vertices[:, ELEVATION]
    vertices[:, ELEVATION] = options.min_height + np.abs(
        (heights - options.min_height) * 2 - height_range
    )


def step(vertices: np.ndarray, levels: Optional[int] = None) -> None:
    """
    Partition elevations into terraces.

    Vertices are sorted by height and split into ``levels`` buckets of
    equal population (the last bucket takes any remainder). Every vertex is
    set to the mean height of its bucket.

    Args:
        vertices: Vertex grid
        levels: Number of terraces; defaults to ``floor((n / 2) ** 0.25)``
    """
    heights = vertices[:, ELEVATION]
    count = len(heights)
    if levels is None:
        levels = int(np.floor((count * 0.5) ** 0.25))
    levels = min(int(levels), count)
    if levels <= 1:
        return

    ordered = np.sort(heights)
    increment = count // levels
    bucket_max = np.empty(levels)
    bucket_avg = np.empty(levels)
    for i in range(levels):
        end = (i + 1) * increment if i < levels - 1 else count
        subset = ordered[i * increment:end]
        bucket_max[i] = subset[-1]
        bucket_avg[i] = subset.mean()

    buckets = np.searchsorted(bucket_max, heights, side="left")
    vertices[:, ELEVATION] = bucket_avg[buckets]
    logger.debug("Stepped terrain", levels=levels, bucket_size=increment)


def smooth(vertices: np.ndarray, options: TerrainOptions, weight: float = 0) -> None:
    """
    Smooth the terrain with a 3x3 box filter.

    Only neighbours inside the grid count towards the mean.

    Args:
        vertices: Vertex grid
        options: Terrain options; only the segment counts matter here
        weight: How much the original height counts relative to the mean
    """
    check_vertex_grid(vertices, options)
    heights = elevation_grid(vertices, options)
    total = ndimage.convolve(heights, _NEIGHBOURHOOD, mode="constant", cval=0.0)
    count = ndimage.convolve(np.ones_like(heights), _NEIGHBOURHOOD, mode="constant", cval=0.0)
    mean = total / count

    smoothed = (mean + heights * weight) / (1 + weight)
    vertices[:, ELEVATION] = smoothed.ravel()


def smooth_median(vertices: np.ndarray, options: TerrainOptions) -> None:
    """Replace every height with the median of its in-grid 3x3 neighbourhood."""
    check_vertex_grid(vertices, options)
    heights = elevation_grid(vertices, options)
    median = ndimage.generic_filter(
        heights, np.nanmedian, size=3, mode="constant", cval=np.nan
    )
    vertices[:, ELEVATION] = median.ravel()


def smooth_conservative(
    vertices: np.ndarray, options: TerrainOptions, multiplier: float = 1
) -> None:
    """
    Remove spikes and pits without flattening slopes.

    A height above every neighbour is lowered to the highest neighbour (and
    the reverse for pits), then blended with the original height.

    Args:
        vertices: Vertex grid
        options: Terrain options; only the segment counts matter here
        multiplier: Weight of the original height in the blend
    """
    check_vertex_grid(vertices, options)
    heights = elevation_grid(vertices, options)
    upper = ndimage.maximum_filter(
        heights, footprint=_NEIGHBOURS_ONLY, mode="constant", cval=-np.inf
    )
    lower = ndimage.minimum_filter(
        heights, footprint=_NEIGHBOURS_ONLY, mode="constant", cval=np.inf
    )
    clamped = np.clip(heights, lower, upper)

    blended = (clamped + heights * multiplier) / (1 + multiplier)
    vertices[:, ELEVATION] = blended.ravel()


def normalize_terrain(vertices: np.ndarray, options: TerrainOptions) -> None:
    """
    Normalize the terrain after applying a heightmap.

    Applies turbulence and terracing when enabled, keeps the terrain within
    the configured height range, and finally calls ``options.after``.
    Errors raised by the hook reach the caller; earlier changes stay
    applied.
    """
    check_vertex_grid(vertices, options)

    if options.turbulent:
        turbulence(vertices, options)

    if options.steps > 1:
        step(vertices, options.steps)
        smooth(vertices, options)

    clamp(vertices, options)

    if options.after is not None:
        options.after(vertices, options)
