"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from ``TERRAIN_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TERRAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Terrain Defaults
    width_segments: int = Field(default=63, description="Default number of segments along x")
    height_segments: int = Field(default=63, description="Default number of segments along y")
    width: float = Field(default=1024.0, description="Default world-space width")
    height: float = Field(default=1024.0, description="Default world-space depth")
    min_height: float = Field(default=-100.0, description="Default minimum elevation")
    max_height: float = Field(default=100.0, description="Default maximum elevation")
    frequency: float = Field(default=2.5, description="Default feature frequency")
    steps: int = Field(default=1, description="Default number of terrace levels")
    easing: str = Field(default="Linear", description="Default easing curve name")
    heightmap: str = Field(default="PerlinDiamond", description="Default heightmap method name")

    # Generation Limits
    max_segments: int = Field(default=4096, description="Maximum segments per axis")


# Instantiate singleton settings object
settings = Settings()
