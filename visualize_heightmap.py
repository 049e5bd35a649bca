#!/usr/bin/env python3
"""
Visualize a generated heightmap.
Renders the elevation grid as a shaded image with contour lines.
"""

import argparse

import numpy as np
import matplotlib.pyplot as plt

from py_terrain.config import list_heightmap_methods
from py_terrain.core import AleaPRNG, TerrainOptions, generate_terrain, heightmap_stats
from py_terrain.core.grid import elevation_grid


def visualize_heightmap(method="PerlinDiamond", segments=127, seed="123456", easing="Linear",
                        steps=1, turbulent=False, output=None):
    """
    Generate and visualize a heightmap.

    Args:
        method: Heightmap method name
        segments: Segments along each axis
        seed: Random seed
        easing: Easing curve name
        steps: Terrace levels
        turbulent: Apply turbulence
        output: Image path; shown interactively when omitted
    """
    options = TerrainOptions(
        width_segments=segments,
        height_segments=segments,
        easing=easing,
        steps=steps,
        turbulent=turbulent,
    )
    print(f"Generating '{method}' heightmap ({segments}x{segments} segments)...")
    vertices = generate_terrain(options, method, rng=AleaPRNG(seed))

    stats = heightmap_stats(vertices)
    print("\nHeightmap statistics:")
    print(f"  Min height: {stats['min']:.1f}")
    print(f"  Max height: {stats['max']:.1f}")
    print(f"  Mean height: {stats['mean']:.1f}")
    print(f"  Std deviation: {stats['std']:.1f}")

    # Rows run from +y to -y, which is top to bottom in image order
    heights = elevation_grid(vertices, options)
    extent = (-options.width / 2, options.width / 2, -options.height / 2, options.height / 2)

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 8))

    im = ax1.imshow(heights, extent=extent, cmap="terrain",
                    vmin=options.min_height, vmax=options.max_height)
    plt.colorbar(im, ax=ax1, label="Height")
    ax1.set_title(f"{method} heightmap")
    ax1.set_xlabel("X")
    ax1.set_ylabel("Y")

    xs = np.linspace(extent[0], extent[1], options.width_segments + 1)
    ys = np.linspace(extent[3], extent[2], options.height_segments + 1)
    contours = ax2.contour(xs, ys, heights, levels=10, cmap="terrain")
    ax2.clabel(contours, inline=True, fontsize=8)
    ax2.set_aspect("equal")
    ax2.set_title("Contours")
    ax2.set_xlabel("X")
    ax2.set_ylabel("Y")

    fig.suptitle(f"Heightmap Visualization - Seed: {seed}", fontsize=16)
    plt.tight_layout()

    if output:
        plt.savefig(output, dpi=150, bbox_inches="tight")
        print(f"\nVisualization saved to: {output}")
    else:
        plt.show()


def main():
    parser = argparse.ArgumentParser(description="Visualize a terrain heightmap")
    parser.add_argument("method", nargs="?", default="PerlinDiamond",
                        choices=list_heightmap_methods())
    parser.add_argument("--segments", type=int, default=127)
    parser.add_argument("--seed", default="123456")
    parser.add_argument("--easing", default="Linear")
    parser.add_argument("--steps", type=int, default=1)
    parser.add_argument("--turbulent", action="store_true")
    parser.add_argument("--output", help="Save the figure instead of showing it")
    args = parser.parse_args()

    visualize_heightmap(args.method, args.segments, args.seed, args.easing,
                        args.steps, args.turbulent, args.output)


if __name__ == "__main__":
    main()
