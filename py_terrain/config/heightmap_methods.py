"""
Named heightmap methods.

Maps the names accepted in settings and by the terrain facade to
generator functions.
"""

from typing import Dict, List

from ..core.heightmap_generator import (
    HeightmapFunction,
    cosine,
    cosine_layers,
    diamond_square,
    fault,
    perlin,
    perlin_diamond,
    perlin_layers,
    simplex,
    simplex_layers,
    value_noise,
    weierstrass,
)

HEIGHTMAP_METHODS: Dict[str, HeightmapFunction] = {
    "Cosine": cosine,
    "CosineLayers": cosine_layers,
    "DiamondSquare": diamond_square,
    "Fault": fault,
    "Perlin": perlin,
    "PerlinDiamond": perlin_diamond,
    "PerlinLayers": perlin_layers,
    "Simplex": simplex,
    "SimplexLayers": simplex_layers,
    "Value": value_noise,
    "Weierstrass": weierstrass,
}


def get_heightmap_method(name: str) -> HeightmapFunction:
    """
    Get a heightmap generator by name.

    Args:
        name: Method name

    Returns:
        Generator function

    Raises:
        KeyError: If method not found
    """
    if name not in HEIGHTMAP_METHODS:
        raise KeyError(
            f"Unknown heightmap method '{name}'. "
            f"Available: {', '.join(list_heightmap_methods())}"
        )
    return HEIGHTMAP_METHODS[name]


def list_heightmap_methods() -> List[str]:
    """Get list of available heightmap method names."""
    return sorted(HEIGHTMAP_METHODS)
