"""
Randomness source helpers.

Every stochastic generator takes an explicit ``rng`` argument instead of
reading a module-level generator. When the caller passes nothing a fresh
source with an unpredictable seed is created, so two calls with the same
options produce different terrain. Passing a seeded source makes a call
reproducible.
"""

import uuid
from typing import Optional, Protocol, Union


class RandomSource(Protocol):
    """Anything with a ``random()`` method returning a float in [0, 1)."""

    def random(self) -> float:
        ...


def new_random_source(seed: Optional[Union[str, int, float]] = None) -> RandomSource:
    """
    Create a new Alea PRNG.

    Args:
        seed: Seed to use. A random UUID is used when omitted.

    Returns:
        AleaPRNG instance
    """
    from ..core.alea_prng import AleaPRNG

    if seed is None:
        seed = uuid.uuid4().hex
    return AleaPRNG(seed)


def resolve_random_source(rng: Optional[RandomSource] = None) -> RandomSource:
    """Return ``rng`` unchanged, or a freshly seeded source when it is None."""
    if rng is None:
        return new_random_source()
    return rng
