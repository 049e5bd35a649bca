"""
Vertex grid construction and heightmap adapters.

A vertex grid is a ``(N, 3)`` float array of x, y, z positions, stored row
by row: the vertex at column ``col`` of row ``row`` lives at
``row * (width_segments + 1) + col``. Only the z column (elevation) is
touched by generators and filters.

Heightmap arrays built from a grid are indexed ``[col][row]``.
"""

import numpy as np
import structlog

from .exceptions import ShapeMismatchError
from .options import TerrainOptions

logger = structlog.get_logger()

ELEVATION = 2


def make_vertex_grid(options: TerrainOptions) -> np.ndarray:
    """
    Build a flat, zero-elevation plane for the given options.

    The plane is centred on the origin: x runs from ``-width / 2`` to
    ``width / 2`` across each row and y runs from ``height / 2`` down to
    ``-height / 2`` from the first row to the last.

    Args:
        options: Terrain options

    Returns:
        Vertex array of shape ((width_segments + 1) * (height_segments + 1), 3)
    """
    xs = np.linspace(-options.width / 2, options.width / 2, options.width_segments + 1)
    ys = np.linspace(options.height / 2, -options.height / 2, options.height_segments + 1)
    grid_x, grid_y = np.meshgrid(xs, ys)

    vertices = np.zeros((options.vertex_count, 3), dtype=np.float64)
    vertices[:, 0] = grid_x.ravel()
    vertices[:, 1] = grid_y.ravel()
    return vertices


def check_vertex_grid(vertices: np.ndarray, options: TerrainOptions) -> None:
    """
    Verify that a vertex grid matches the options.

    Raises:
        ShapeMismatchError: If the grid is not a (N, 3) array with one
            vertex per grid point
    """
    expected = (options.vertex_count, 3)
    actual = getattr(vertices, "shape", None)
    if actual != expected:
        logger.warning("Vertex grid shape mismatch", expected=expected, actual=actual)
        raise ShapeMismatchError(
            f"Vertex grid has shape {actual}, expected {expected}",
            expected=expected,
            actual=actual,
        )


def grid_indices(options: TerrainOptions):
    """
    Column and row index of every grid point.

    Returns:
        Tuple ``(cols, rows)`` of float arrays shaped ``[row][col]``
    """
    cols, rows = np.meshgrid(
        np.arange(options.width_segments + 1, dtype=np.float64),
        np.arange(options.height_segments + 1, dtype=np.float64),
    )
    return cols, rows


def elevation_grid(vertices: np.ndarray, options: TerrainOptions) -> np.ndarray:
    """Return the elevation channel as a ``[row][col]`` array."""
    return vertices[:, ELEVATION].reshape(
        options.height_segments + 1, options.width_segments + 1
    )


def add_elevation(vertices: np.ndarray, delta: np.ndarray) -> None:
    """Add a ``[row][col]`` array of height changes onto the grid."""
    vertices[:, ELEVATION] += np.asarray(delta, dtype=np.float64).ravel()


def to_array_2d(vertices: np.ndarray, options: TerrainOptions) -> np.ndarray:
    """
    Copy the heightmap of a vertex grid into a 2D array.

    Args:
        vertices: Vertex grid
        options: Terrain options; only the segment counts matter here

    Returns:
        Array of shape (width_segments + 1, height_segments + 1) indexed
        ``[col][row]``
    """
    check_vertex_grid(vertices, options)
    return elevation_grid(vertices, options).T.copy()


def from_array_2d(vertices: np.ndarray, src: np.ndarray) -> None:
    """
    Set vertex elevations from a ``[col][row]`` heightmap.

    Raises:
        ShapeMismatchError: If ``src`` does not cover the grid exactly
    """
    src = np.asarray(src, dtype=np.float64)
    if src.ndim != 2 or src.size != len(vertices):
        raise ShapeMismatchError(
            f"Heightmap of shape {src.shape} does not cover {len(vertices)} vertices",
            expected=len(vertices),
            actual=src.shape,
        )
    vertices[:, ELEVATION] = src.T.ravel()


def to_array_1d(vertices: np.ndarray) -> np.ndarray:
    """Copy the heightmap of a vertex grid into a flat array."""
    return np.array(vertices[:, ELEVATION], dtype=np.float64)


def from_array_1d(vertices: np.ndarray, src: np.ndarray) -> None:
    """
    Set vertex elevations from a flat heightmap.

    Only the overlapping prefix is written when the lengths differ.
    """
    src = np.asarray(src, dtype=np.float64).ravel()
    count = min(len(vertices), len(src))
    if count != len(vertices) or count != len(src):
        logger.debug("Truncating heightmap write", vertices=len(vertices), values=len(src))
    vertices[:count, ELEVATION] = src[:count]
