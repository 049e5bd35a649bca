"""
Configuration modules for terrain generation.
"""

from .config import Settings, settings
from .heightmap_methods import HEIGHTMAP_METHODS, get_heightmap_method, list_heightmap_methods

__all__ = ['Settings', 'settings', 'HEIGHTMAP_METHODS', 'get_heightmap_method',
           'list_heightmap_methods']
