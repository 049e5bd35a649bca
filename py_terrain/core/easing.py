"""
Easing curves used when clamping terrain into its height range.

Each function maps [0, 1] onto [0, 1] and works on floats and NumPy
arrays alike.
"""

from typing import Callable, Dict, List

import numpy as np

EasingFunction = Callable[[float], float]


def linear(x):
    return x


def ease_in(x):
    """x^2"""
    return x * x


def ease_out(x):
    """-x(x-2)"""
    return -x * (x - 2)


def ease_in_out(x):
    """
    x^2(3-2x)

    Nearly identical alternatives are 0.5+0.5*cos(x*pi-pi) and
    x^a/(x^a+(1-x)^a) with a=1.6.
    """
    return x * x * (3 - 2 * x)


def in_ease_out(x):
    """0.5*(2x-1)^3+0.5"""
    y = 2 * x - 1
    return 0.5 * y * y * y + 0.5


def ease_in_weak(x):
    """x^1.55"""
    return np.power(x, 1.55)


def ease_in_strong(x):
    """x^7"""
    return x * x * x * x * x * x * x


EASINGS: Dict[str, EasingFunction] = {
    "Linear": linear,
    "EaseIn": ease_in,
    "EaseOut": ease_out,
    "EaseInOut": ease_in_out,
    "InEaseOut": in_ease_out,
    "EaseInWeak": ease_in_weak,
    "EaseInStrong": ease_in_strong,
}


def get_easing(name: str) -> EasingFunction:
    """
    Look up an easing function by name.

    Raises:
        KeyError: If the name is unknown
    """
    try:
        return EASINGS[name]
    except KeyError:
        raise KeyError(
            f"Unknown easing '{name}'. Available: {', '.join(list_easings())}"
        ) from None


def list_easings() -> List[str]:
    """Get list of available easing names."""
    return sorted(EASINGS)
