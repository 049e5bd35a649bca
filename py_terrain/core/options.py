"""
Terrain options: the immutable record every generator and filter reads.
"""

from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .easing import EasingFunction, get_easing, linear
from .exceptions import ConfigurationError

logger = structlog.get_logger()

AfterHook = Callable[..., None]


class TerrainOptions(BaseModel):
    """
    Settings that control how terrain is generated.

    Instances are frozen. Derive adjusted copies with :meth:`replace`, which
    validates the result again. Invalid values raise
    :class:`ConfigurationError`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    width_segments: int = Field(default=63, ge=1, description="Segments along x")
    height_segments: int = Field(default=63, ge=1, description="Segments along y")
    width: float = Field(default=1024.0, gt=0, allow_inf_nan=False, description="World-space width")
    height: float = Field(default=1024.0, gt=0, allow_inf_nan=False, description="World-space depth")
    min_height: float = Field(default=-100.0, allow_inf_nan=False, description="Lowest allowed elevation")
    max_height: float = Field(default=100.0, allow_inf_nan=False, description="Highest allowed elevation")
    frequency: float = Field(default=2.5, gt=0, allow_inf_nan=False, description="Feature frequency")
    steps: int = Field(default=1, ge=1, description="Terrace levels (1 disables stepping)")
    stretch: bool = Field(default=True, description="Stretch heights to fill the range when clamping")
    turbulent: bool = Field(default=False, description="Apply turbulence after generation")
    easing: EasingFunction = Field(default=linear, description="Easing curve used when clamping")
    after: Optional[AfterHook] = Field(default=None, description="Post-processing hook")

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            logger.warning("Invalid terrain options", error_count=exc.error_count())
            raise ConfigurationError(str(exc)) from exc

    @field_validator("easing", mode="before")
    @classmethod
    def _resolve_easing(cls, value):
        if isinstance(value, str):
            try:
                return get_easing(value)
            except KeyError as exc:
                raise ValueError(exc.args[0]) from None
        if not callable(value):
            raise ValueError("easing must be callable or an easing name")
        return value

    @field_validator("after")
    @classmethod
    def _check_after(cls, value):
        if value is not None and not callable(value):
            raise ValueError("after must be callable")
        return value

    @model_validator(mode="after")
    def _check_height_range(self):
        if self.max_height < self.min_height:
            raise ValueError(
                f"max_height ({self.max_height}) must not be below min_height ({self.min_height})"
            )
        return self

    @property
    def height_range(self) -> float:
        """Distance between the lowest and highest allowed elevation."""
        return self.max_height - self.min_height

    @property
    def vertex_count(self) -> int:
        """Number of vertices in a grid built for these options."""
        return (self.width_segments + 1) * (self.height_segments + 1)

    def replace(self, **changes: Any) -> "TerrainOptions":
        """Return a validated copy with ``changes`` applied."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self)(**values)

    @classmethod
    def from_settings(cls, settings=None, **overrides: Any) -> "TerrainOptions":
        """
        Build options from application settings.

        Args:
            settings: Settings instance; the module singleton when omitted
            **overrides: Field values that take precedence over settings

        Returns:
            Validated TerrainOptions
        """
        if settings is None:
            from ..config.config import settings

        values = {
            "width_segments": settings.width_segments,
            "height_segments": settings.height_segments,
            "width": settings.width,
            "height": settings.height,
            "min_height": settings.min_height,
            "max_height": settings.max_height,
            "frequency": settings.frequency,
            "steps": settings.steps,
            "easing": settings.easing,
        }
        values.update(overrides)

        for key in ("width_segments", "height_segments"):
            if values[key] > settings.max_segments:
                logger.warning(
                    "Segment count above limit",
                    field=key,
                    value=values[key],
                    limit=settings.max_segments,
                )
                raise ConfigurationError(
                    f"{key}={values[key]} exceeds max_segments={settings.max_segments}"
                )

        return cls(**values)
