"""
Seedable 2D Perlin and simplex noise.

Gradient noise after Stefan Gustavson's reference implementation, evaluated
with NumPy so whole coordinate grids are sampled in one call. Each
``NoiseGenerator`` owns its permutation and gradient tables; nothing is
shared between instances, so concurrent generation calls cannot disturb
each other's noise sequence.
"""

from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]

# Gradient directions (the 2D part of the 12 cube-edge vectors)
_GRAD3 = np.array([
    [1, 1], [-1, 1], [1, -1], [-1, -1],
    [1, 0], [-1, 0], [1, 0], [-1, 0],
    [0, 1], [0, -1], [0, 1], [0, -1],
], dtype=np.float64)

# Ken Perlin's reference permutation
_P = np.array([
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
    140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
    247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
    57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
    74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
    60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
    65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
    200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
    52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
    207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
    119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
    129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
    218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
    81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
    184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
    222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
], dtype=np.int64)

# Skewing factors for 2D simplex
_F2 = 0.5 * (np.sqrt(3.0) - 1.0)
_G2 = (3.0 - np.sqrt(3.0)) / 6.0


def _fade(t):
    """6t^5 - 15t^4 + 10t^3"""
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(a, b, t):
    return (1 - t) * a + t * b


class NoiseGenerator:
    """
    Permutation-table noise source.

    Args:
        seed: Initial seed; see :meth:`seed`.
    """

    def __init__(self, seed: float = 0):
        self.perm = np.zeros(512, dtype=np.int64)
        self.grad = np.zeros((512, 2), dtype=np.float64)
        self.seed(seed)

    def seed(self, value: float) -> None:
        """
        Reinitialize the permutation and gradient tables.

        Values strictly between 0 and 1 are scaled by 65536 so that the
        output of ``random()`` can be used directly. Small seeds are
        widened so both table halves are disturbed.
        """
        if 0 < value < 1:
            value *= 65536
        value = int(np.floor(value))
        if value < 256:
            value |= value << 8

        index = np.arange(256)
        mixed = np.where(
            index & 1,
            _P ^ (value & 255),
            _P ^ ((value >> 8) & 255),
        )
        self.perm[:256] = mixed
        self.perm[256:] = mixed
        self.grad[:256] = _GRAD3[mixed % 12]
        self.grad[256:] = _GRAD3[mixed % 12]

    def _dot(self, index, x, y):
        g = self.grad[index]
        return g[..., 0] * x + g[..., 1] * y

    def perlin(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """
        2D Perlin noise.

        Args:
            x, y: Coordinates (scalars or arrays of the same shape)

        Returns:
            Noise values in approximately [-1, 1]
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        cell_x = np.floor(x)
        cell_y = np.floor(y)
        x = x - cell_x
        y = y - cell_y
        cx = cell_x.astype(np.int64) & 255
        cy = cell_y.astype(np.int64) & 255

        n00 = self._dot(cx + self.perm[cy], x, y)
        n01 = self._dot(cx + self.perm[cy + 1], x, y - 1)
        n10 = self._dot(cx + 1 + self.perm[cy], x - 1, y)
        n11 = self._dot(cx + 1 + self.perm[cy + 1], x - 1, y - 1)

        u = _fade(x)
        result = _lerp(_lerp(n00, n10, u), _lerp(n01, n11, u), _fade(y))
        return result if result.ndim else float(result)

    def simplex(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """
        2D simplex noise.

        Args:
            x, y: Coordinates (scalars or arrays of the same shape)

        Returns:
            Noise values in approximately [-1, 1]
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        # Skew the input space to find the simplex cell
        s = (x + y) * _F2
        i = np.floor(x + s)
        j = np.floor(y + s)
        t = (i + j) * _G2
        x0 = x - i + t
        y0 = y - j + t

        # Upper or lower triangle of the cell
        i1 = (x0 > y0).astype(np.int64)
        j1 = 1 - i1

        x1 = x0 - i1 + _G2
        y1 = y0 - j1 + _G2
        x2 = x0 - 1 + 2 * _G2
        y2 = y0 - 1 + 2 * _G2

        i = i.astype(np.int64) & 255
        j = j.astype(np.int64) & 255
        gi0 = i + self.perm[j]
        gi1 = i + i1 + self.perm[j + j1]
        gi2 = i + 1 + self.perm[j + 1]

        total = np.zeros_like(x)
        for gi, cx, cy in ((gi0, x0, y0), (gi1, x1, y1), (gi2, x2, y2)):
            falloff = 0.5 - cx * cx - cy * cy
            falloff = np.where(falloff < 0, 0.0, falloff)
            falloff *= falloff
            total = total + falloff * falloff * self._dot(gi, cx, cy)

        result = 70 * total
        return result if result.ndim else float(result)
