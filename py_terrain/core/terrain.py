"""
Terrain generation entry point.

Builds (or checks) a vertex grid, runs one heightmap method on it and
normalizes the result, returning the grid for the renderer.
"""

import time
from typing import Dict, Optional, Union

import numpy as np
import structlog

from ..utils.random import RandomSource
from .filters import normalize_terrain
from .grid import ELEVATION, check_vertex_grid, make_vertex_grid
from .heightmap_generator import HeightmapFunction
from .options import TerrainOptions

logger = structlog.get_logger()


def generate_terrain(
    options: TerrainOptions,
    heightmap: Optional[Union[str, HeightmapFunction]] = None,
    vertices: Optional[np.ndarray] = None,
    rng: Optional[RandomSource] = None,
) -> np.ndarray:
    """
    Generate a terrain heightmap.

    Args:
        options: Terrain options
        heightmap: Heightmap method name or generator function; the
            configured default (``settings.heightmap``) when omitted
        vertices: Existing vertex grid to modify in place; a flat plane is
            created when omitted
        rng: Randomness source; a freshly seeded one when omitted

    Returns:
        The vertex grid with elevations set

    Raises:
        ShapeMismatchError: If ``vertices`` does not match the options
        KeyError: If ``heightmap`` names no known method
    """
    if heightmap is None:
        from ..config.config import settings

        heightmap = settings.heightmap

    if isinstance(heightmap, str):
        from ..config.heightmap_methods import get_heightmap_method

        method_name = heightmap
        method = get_heightmap_method(heightmap)
    else:
        method_name = getattr(heightmap, "__name__", repr(heightmap))
        method = heightmap

    if vertices is None:
        vertices = make_vertex_grid(options)
    else:
        check_vertex_grid(vertices, options)

    start_time = time.time()
    method(vertices, options, rng=rng)
    normalize_terrain(vertices, options)

    logger.info(
        "Terrain generated",
        method=method_name,
        width_segments=options.width_segments,
        height_segments=options.height_segments,
        elapsed_ms=round((time.time() - start_time) * 1000, 2),
    )
    return vertices


def heightmap_stats(vertices: np.ndarray) -> Dict[str, float]:
    """Summary statistics of the elevation channel."""
    heights = vertices[:, ELEVATION]
    return {
        "min": float(np.min(heights)),
        "max": float(np.max(heights)),
        "mean": float(np.mean(heights)),
        "std": float(np.std(heights)),
    }
