"""
Seeded randomness source for terrain generators.

Every stochastic generator takes an ``rng`` argument and draws all of its
random values (fault lines, displacement noise, noise-table seeds, wave
phases) from it. Passing an ``AleaPRNG`` built from a fixed seed makes a
generation call, or a whole multi-pass composition, reproducible; omitting
it gives a fresh unpredictable source per call (see
:func:`py_terrain.utils.random.resolve_random_source`).

The algorithm is Johannes Baagøe's Alea.
"""

_NORM32 = 2.3283064365386963e-10  # 2^-32


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Baagøe's Mash hash, folding the string form of a value into [0, 1)."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        n = self.n
        for char in str(data):
            n += ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * 0x100000000  # 2^32
        self.n = n
        return _uint32(n) * _NORM32


class AleaPRNG:
    """
    Reproducible stream of uniform floats in [0, 1).

    Satisfies the ``RandomSource`` protocol the generators accept. A list or
    tuple seed mixes in each element, so ``AleaPRNG(["terrain", 42])`` can
    derive distinct streams from one base seed.

    Args:
        seed: String, number, or list/tuple of either
    """

    def __init__(self, seed):
        self.seed = seed
        self.call_count = 0

        parts = list(seed) if isinstance(seed, (list, tuple)) else [seed]
        mash = _Mash()
        state = [mash(" "), mash(" "), mash(" ")]
        for part in parts:
            for i in range(3):
                state[i] -= mash(part)
                if state[i] < 0:
                    state[i] += 1

        self.s0, self.s1, self.s2 = state
        self.c = 1

    def random(self) -> float:
        """Next value of the stream."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _NORM32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def __repr__(self):
        return f"AleaPRNG(seed={self.seed!r}, calls={self.call_count})"
