"""
Configuration management for Herbie Runner.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from herbie_runner.gameplay.constants import (
    VIEW_WIDTH, VIEW_HEIGHT, TARGET_SPACING, MAX_STRETCH, BOOST_DECAY,
    Y_SMOOTHING, DISTANCE_SCALE, MAX_DELTA_TIME, HUD_UPDATE_INTERVAL_MS
)


class Settings(BaseSettings):
    """Application settings loaded from HERBIE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HERBIE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Display
    view_width: int = Field(default=VIEW_WIDTH, gt=0, description="Window width in pixels")
    view_height: int = Field(default=VIEW_HEIGHT, gt=0, description="Window height in pixels")
    fps: int = Field(default=60, gt=0, description="Target frames per second")
    palette: str = Field(default="sunset", description="Starting palette: dawn or sunset")
    high_contrast: bool = Field(
        default=False,
        description="High-contrast default, used until a preference is stored"
    )

    # Persistence
    preferences_path: Path = Field(
        default=Path.home() / ".herbie_runner" / "preferences.json",
        description="Key-value file holding the best score and contrast preference"
    )

    # Logging
    log_level: str = Field(default="INFO")

    # Loop
    max_delta_time: float = Field(
        default=MAX_DELTA_TIME,
        gt=0,
        description="Longest step simulated in one tick, in seconds"
    )
    hud_update_interval_ms: float = Field(
        default=HUD_UPDATE_INTERVAL_MS,
        ge=0,
        description="Wall-clock interval between HUD/audio/palette pushes"
    )

    # Caravan tuning
    target_spacing: float = Field(default=TARGET_SPACING, gt=0)
    max_stretch: float = Field(
        default=MAX_STRETCH,
        gt=0,
        description="Gap between neighbours that ends the run"
    )
    boost_decay: float = Field(
        default=BOOST_DECAY,
        ge=0,
        description="Offload boost decay per second"
    )
    y_smoothing: float = Field(default=Y_SMOOTHING, ge=0)
    distance_scale: float = Field(
        default=DISTANCE_SCALE,
        gt=0,
        description="Pixels per second at speed 1.0"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    """
    return Settings()
