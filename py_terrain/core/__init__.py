"""
Core terrain generation functionality.
"""

from .alea_prng import AleaPRNG
from .exceptions import ConfigurationError, ShapeMismatchError, TerrainError
from .options import TerrainOptions
from .grid import make_vertex_grid, to_array_1d, from_array_1d, to_array_2d, from_array_2d
from .heightmap_generator import Pass, multi_pass
from .filters import normalize_terrain
from .terrain import generate_terrain, heightmap_stats

__all__ = ['AleaPRNG', 'ConfigurationError', 'ShapeMismatchError', 'TerrainError',
           'TerrainOptions', 'make_vertex_grid', 'to_array_1d', 'from_array_1d',
           'to_array_2d', 'from_array_2d', 'Pass', 'multi_pass', 'normalize_terrain',
           'generate_terrain', 'heightmap_stats']
