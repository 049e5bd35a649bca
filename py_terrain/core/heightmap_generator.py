"""
Heightmap generation algorithms.

Every generator has the signature ``generator(vertices, options, rng=None)``
and adds elevation onto the z column of the vertex grid instead of
replacing it, so generators can be layered with :func:`multi_pass`.

``rng`` is any object with a ``random()`` method. When omitted, a freshly
seeded Alea PRNG is used and two calls with identical options produce
different terrain; pass a seeded source to make a call reproducible.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np
import structlog

from ..utils.random import RandomSource, resolve_random_source
from .filters import clamp, smooth_median
from .grid import add_elevation, check_vertex_grid, grid_indices
from .noise import NoiseGenerator
from .options import TerrainOptions

logger = structlog.get_logger()

HeightmapFunction = Callable[..., None]


@dataclass(frozen=True)
class Pass:
    """
    One layer of a multi-pass heightmap.

    ``amplitude`` must not be negative; see :func:`multi_pass`.
    """

    method: HeightmapFunction
    amplitude: float = 1.0
    frequency: Optional[float] = None  # None keeps options.frequency


def multi_pass(
    vertices: np.ndarray,
    options: TerrainOptions,
    passes: Sequence[Pass],
    rng: Optional[RandomSource] = None,
) -> None:
    """
    Compose heightmap functions additively.

    Each pass runs against the shared grid with a narrowed height window:
    an amplitude of 1 keeps the full range, 0.5 keeps the middle half.
    Passes run in order and each adds onto the result of the previous ones.
    Amplitudes above 1 widen the window; a negative amplitude would invert
    it and raises :class:`ConfigurationError` when the narrowed options are
    built.

    Args:
        vertices: Vertex grid
        options: Base terrain options
        passes: Layers to apply
        rng: Randomness source shared by all passes
    """
    check_vertex_grid(vertices, options)
    rng = resolve_random_source(rng)
    height_range = options.height_range

    for layer in passes:
        move = 0.5 * (height_range - height_range * layer.amplitude)
        frequency = options.frequency if layer.frequency is None else layer.frequency
        layer_options = options.replace(
            min_height=options.min_height + move,
            max_height=options.max_height - move,
            frequency=frequency,
        )
        layer.method(vertices, layer_options, rng=rng)


def curve(
    vertices: np.ndarray,
    options: TerrainOptions,
    fn: Callable[[np.ndarray, np.ndarray], np.ndarray],
) -> None:
    """
    Generate terrain from a function of position.

    Args:
        vertices: Vertex grid
        options: Terrain options
        fn: Takes x and y arrays (grid indices scaled by
            ``frequency / (min(segments) + 1)``) and returns a height
            multiplier for each point; it is called once with whole arrays
    """
    check_vertex_grid(vertices, options)
    half_range = options.height_range * 0.5
    scalar = options.frequency / (min(options.width_segments, options.height_segments) + 1)
    cols, rows = grid_indices(options)
    values = np.broadcast_to(fn(cols * scalar, rows * scalar), cols.shape)
    add_elevation(vertices, values * half_range)


def cosine(
    vertices: np.ndarray,
    options: TerrainOptions,
    rng: Optional[RandomSource] = None,
    phase: Optional[float] = None,
) -> None:
    """
    Generate terrain from two crossing cosine waves.

    Args:
        vertices: Vertex grid
        options: Terrain options
        rng: Randomness source for the phase
        phase: Fixed phase in radians; drawn from ``rng`` when omitted
    """
    check_vertex_grid(vertices, options)
    amplitude = options.height_range * 0.5
    frequency_scalar = (options.frequency * math.pi) / (
        min(options.width_segments, options.height_segments) + 1
    )
    if phase is None:
        phase = resolve_random_source(rng).random() * math.pi * 2

    cols, rows = grid_indices(options)
    add_elevation(
        vertices,
        amplitude * (np.cos(cols * frequency_scalar + phase) + np.cos(rows * frequency_scalar + phase)),
    )


def cosine_layers(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """Generate terrain from layers of cosine waves."""
    multi_pass(vertices, options, [
        Pass(cosine, amplitude=1, frequency=2.5),
        Pass(cosine, amplitude=0.1, frequency=12),
        Pass(cosine, amplitude=0.05, frequency=15),
        Pass(cosine, amplitude=0.025, frequency=20),
    ], rng=rng)


def _ceil_power_of_two(value: int) -> int:
    return 1 << max(int(value) - 1, 0).bit_length()


def diamond_square(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """
    Generate terrain using the diamond-square method.

    The heightmap is built on a square whose side is the smallest power of
    two covering the grid, then the overlapping window is added to the
    vertices. Displacement halves at each subdivision level.

    Args:
        vertices: Vertex grid
        options: Terrain options
        rng: Randomness source
    """
    check_vertex_grid(vertices, options)
    rng = resolve_random_source(rng)
    segments = _ceil_power_of_two(max(options.width_segments, options.height_segments) + 1)
    size = segments + 1
    heightmap = np.zeros((size, size), dtype=np.float64)
    smoothing = options.height_range
    logger.debug("Diamond-square buffer", segments=segments)

    length = segments
    while length >= 2:
        half = length // 2
        smoothing /= 2

        # Square step: centre of each square is the mean of its corners
        for x in range(0, segments, length):
            for y in range(0, segments, length):
                d = rng.random() * smoothing * 2 - smoothing
                avg = (
                    heightmap[x][y]
                    + heightmap[x + length][y]
                    + heightmap[x][y + length]
                    + heightmap[x + length][y + length]
                ) * 0.25
                heightmap[x + half][y + half] = avg + d

        # Diamond step: edge midpoints, wrapping around the buffer
        for x in range(0, segments, half):
            for y in range((x + half) % length, segments, length):
                d = rng.random() * smoothing * 2 - smoothing
                avg = (
                    heightmap[(x - half + size) % size][y]
                    + heightmap[(x + half) % size][y]
                    + heightmap[x][(y + half) % size]
                    + heightmap[x][(y - half + size) % size]
                ) * 0.25
                avg += d
                heightmap[x][y] = avg
                # Mirror onto the opposite border so it is not left at zero
                if x == 0:
                    heightmap[segments][y] = avg
                if y == 0:
                    heightmap[x][segments] = avg

        length //= 2

    window = heightmap[:options.width_segments + 1, :options.height_segments + 1]
    add_elevation(vertices, window.T)


def fault(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """
    Generate terrain using the fault method.

    Repeatedly draws random lines across the terrain, raising one side and
    lowering the other. Near the line the displacement follows a cosine
    over ``smooth_distance`` instead of stepping.

    Args:
        vertices: Vertex grid
        options: Terrain options
        rng: Randomness source
    """
    check_vertex_grid(vertices, options)
    rng = resolve_random_source(rng)
    ws, hs = options.width_segments, options.height_segments
    diagonal = math.sqrt(ws * ws + hs * hs)
    iterations = diagonal * options.frequency
    displacement = (options.height_range * 0.5) / iterations
    smooth_distance = min(options.width / ws, options.height / hs) * options.frequency
    logger.debug("Fault lines", iterations=math.ceil(iterations), smooth_distance=smooth_distance)

    cols, rows = grid_indices(options)
    delta = np.zeros_like(cols)
    for _ in range(math.ceil(iterations)):
        v = rng.random()
        a = math.sin(v * math.pi * 2)
        b = math.cos(v * math.pi * 2)
        c = rng.random() * diagonal - diagonal * 0.5

        distance = a * cols + b * rows - c
        delta += np.where(
            distance > smooth_distance,
            displacement,
            np.where(
                distance < -smooth_distance,
                -displacement,
                np.cos(distance / smooth_distance * math.pi * 2) * displacement,
            ),
        )

    add_elevation(vertices, delta)


def perlin(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """Generate terrain using Perlin noise."""
    check_vertex_grid(vertices, options)
    noise = NoiseGenerator(resolve_random_source(rng).random())
    half_range = options.height_range * 0.5
    divisor = (min(options.width_segments, options.height_segments) + 1) / options.frequency
    cols, rows = grid_indices(options)
    add_elevation(vertices, noise.perlin(cols / divisor, rows / divisor) * half_range)


def _median_smoothing(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    smooth_median(vertices, options)


def perlin_diamond(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """Generate terrain by composing Perlin noise and diamond-square."""
    multi_pass(vertices, options, [
        Pass(perlin),
        Pass(diamond_square, amplitude=0.75),
        Pass(_median_smoothing),
    ], rng=rng)


def perlin_layers(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """Generate terrain from layers of Perlin noise."""
    multi_pass(vertices, options, [
        Pass(perlin, frequency=1.25),
        Pass(perlin, amplitude=0.05, frequency=2.5),
        Pass(perlin, amplitude=0.35, frequency=5),
        Pass(perlin, amplitude=0.15, frequency=10),
    ], rng=rng)


def simplex(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """Generate terrain using simplex noise."""
    check_vertex_grid(vertices, options)
    noise = NoiseGenerator(resolve_random_source(rng).random())
    half_range = options.height_range * 0.5
    divisor = ((min(options.width_segments, options.height_segments) + 1) * 2) / options.frequency
    cols, rows = grid_indices(options)
    add_elevation(vertices, noise.simplex(cols / divisor, rows / divisor) * half_range)


def simplex_layers(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """Generate terrain from layers of simplex noise."""
    multi_pass(vertices, options, [
        Pass(simplex, frequency=1.25),
        Pass(simplex, amplitude=0.5, frequency=2.5),
        Pass(simplex, amplitude=0.25, frequency=5),
        Pass(simplex, amplitude=0.125, frequency=10),
        Pass(simplex, amplitude=0.0625, frequency=20),
    ], rng=rng)


def white_noise(
    data: np.ndarray,
    scale: int,
    segments: int,
    height_range: float,
    rng: RandomSource,
) -> bool:
    """
    Fill ``data`` with interpolated white noise at a coarser resolution.

    Random samples are placed every ``segments // scale`` points in both
    directions and the points in between are bilinearly interpolated.
    Interpolation reads that would fall outside the sample lattice use the
    sample itself.

    Args:
        data: Target buffer of shape (segments + 1, segments + 1), indexed
            ``[x][y]``; overwritten
        scale: Number of samples along each side
        segments: Side length of the target buffer minus one
        height_range: Altitude of the noise
        rng: Randomness source

    Returns:
        False when ``scale`` exceeds ``segments`` and nothing was written
    """
    if scale > segments:
        return False
    increment = segments // scale
    lattice = np.arange(0, segments + 1, increment)

    samples = np.empty((len(lattice), len(lattice)), dtype=np.float64)
    for a in range(len(lattice)):
        for b in range(len(lattice)):
            samples[a][b] = rng.random() * height_range

    positions = np.arange(segments + 1) / increment
    lower = np.minimum(np.floor(positions).astype(np.int64), len(lattice) - 1)
    upper = np.minimum(lower + 1, len(lattice) - 1)
    fraction = positions - lower

    px = fraction[:, np.newaxis]
    py = fraction[np.newaxis, :]
    corner = samples[np.ix_(lower, lower)]
    left = samples[np.ix_(lower, upper)]
    bottom = samples[np.ix_(upper, lower)]
    top = samples[np.ix_(upper, upper)]

    r1 = px * bottom + (1 - px) * corner
    r2 = px * top + (1 - px) * left
    data[:, :] = py * r2 + (1 - py) * r1
    return True


def value_noise(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """
    Generate terrain using value noise.

    White noise is generated at resolutions of 4 to 64 samples per side,
    each layer with a smaller amplitude, interpolated up to full resolution
    and added to the terrain. The result is clamped into the height range
    to remove interpolation artifacts.

    Args:
        vertices: Vertex grid
        options: Terrain options
        rng: Randomness source
    """
    check_vertex_grid(vertices, options)
    rng = resolve_random_source(rng)
    # At least 4 so the coarsest layer fits on the smallest grid
    segments = max(4, _ceil_power_of_two(max(options.width_segments, options.height_segments) + 1))
    data = np.zeros((segments + 1, segments + 1), dtype=np.float64)
    height_range = options.height_range

    layers = 0
    for i in range(2, 7):
        if white_noise(data, 2 ** i, segments, height_range * 2 ** (2.4 - i * 1.2), rng):
            window = data[:options.width_segments + 1, :options.height_segments + 1]
            add_elevation(vertices, window.T)
            layers += 1
    logger.debug("Value noise layers", segments=segments, layers=layers)

    clamp(vertices, options.replace(stretch=True, easing="Linear"))


generate_from_value_noise = value_noise


def weierstrass(
    vertices: np.ndarray, options: TerrainOptions, rng: Optional[RandomSource] = None
) -> None:
    """
    Generate terrain using Weierstrass functions.

    Weierstrass functions are continuous but nowhere differentiable, which
    gives terrain-like shapes that can look repetitive from above. The
    result is clamped with the caller's options.

    Args:
        vertices: Vertex grid
        options: Terrain options
        rng: Randomness source
    """
    check_vertex_grid(vertices, options)
    rng = resolve_random_source(rng)
    half_range = options.height_range * 0.5
    dir1 = 1 if rng.random() < 0.5 else -1
    dir2 = 1 if rng.random() < 0.5 else -1
    r11 = 0.5 + rng.random() * 1.0
    r12 = 0.5 + rng.random() * 1.0
    r13 = 0.025 + rng.random() * 0.1
    r14 = -1.0 + rng.random() * 2.0
    r21 = 0.5 + rng.random() * 1.0
    r22 = 0.5 + rng.random() * 1.0
    r23 = 0.025 + rng.random() * 0.1
    r24 = -1.0 + rng.random() * 2.0

    i, j = grid_indices(options)
    total = np.zeros_like(i)
    for k in range(20):
        x = (1 + r11) ** -k * np.sin((1 + r12) ** k * (i + 0.25 * np.cos(j) + r14 * j) * r13)
        y = (1 + r21) ** -k * np.sin((1 + r22) ** k * (j + 0.25 * np.cos(i) + r24 * i) * r23)
        total -= np.exp(dir1 * x * x + dir2 * y * y)

    add_elevation(vertices, total * half_range)
    clamp(vertices, options)

