#!/usr/bin/env python3
"""
Simple demo script showing heightmap generation capabilities.
"""

import numpy as np
from py_terrain.config import settings, list_heightmap_methods
from py_terrain.core import AleaPRNG, TerrainOptions, generate_terrain, heightmap_stats, multi_pass, Pass
from py_terrain.core.grid import make_vertex_grid
from py_terrain.core.filters import normalize_terrain
from py_terrain.core.heightmap_generator import diamond_square, simplex
from py_terrain.utils.log_config import configure_logging


def main():
    """Demonstrate heightmap generation."""
    configure_logging(settings.log_level, settings.log_format)

    print("Py-Terrain Heightmap Generation Demo")
    print("=" * 40)

    options = TerrainOptions.from_settings(width_segments=63, height_segments=63)
    print(f"\nGrid: {options.width_segments}x{options.height_segments} segments, "
          f"heights {options.min_height} to {options.max_height}")

    for name in list_heightmap_methods():
        print(f"\n{name}:")
        print("-" * 30)

        vertices = generate_terrain(options, name, rng=AleaPRNG(f"{name}_demo"))
        stats = heightmap_stats(vertices)
        heights = vertices[:, 2]

        print(f"  Height range: {stats['min']:.1f} to {stats['max']:.1f}")
        print(f"  Mean height: {stats['mean']:.1f} (std {stats['std']:.1f})")

        # Show height distribution
        hist, bins = np.histogram(heights, bins=7, range=(options.min_height, options.max_height))
        print("  Height distribution:")
        for i in range(len(hist)):
            bar = '#' * int(hist[i] / max(hist) * 20)
            print(f"    {bins[i]:7.1f}-{bins[i+1]:7.1f}: {bar} ({hist[i]})")

    # Custom composition example
    print("\n\nCustom Composition Example:")
    print("-" * 30)
    print("Simplex base with a faint diamond-square texture, terraced...")

    custom = options.replace(steps=6, easing="EaseInWeak")
    vertices = make_vertex_grid(custom)
    multi_pass(vertices, custom, [
        Pass(simplex, frequency=1.5),
        Pass(diamond_square, amplitude=0.2),
    ], rng=AleaPRNG("custom_demo"))
    normalize_terrain(vertices, custom)

    stats = heightmap_stats(vertices)
    print(f"  Distinct heights: {len(np.unique(np.round(vertices[:, 2], 6)))}")
    print(f"  Max elevation: {stats['max']:.1f}")
    print(f"  Average elevation: {stats['mean']:.1f}")


if __name__ == "__main__":
    main()
