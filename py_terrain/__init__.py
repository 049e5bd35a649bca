"""
Procedural terrain heightmap generation.
"""

__version__ = "0.1.0"
