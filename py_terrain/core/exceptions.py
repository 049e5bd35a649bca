"""Errors raised by the terrain engine."""


class TerrainError(Exception):
    """Base class for terrain generation errors."""


class ConfigurationError(TerrainError, ValueError):
    """Terrain options are invalid (inverted height range, empty grid, ...)."""


class ShapeMismatchError(TerrainError, ValueError):
    """A vertex grid or heightmap buffer does not match the options."""

    def __init__(self, message: str, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
