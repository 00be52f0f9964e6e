"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested groups use the ``__`` delimiter, e.g. ``RETROCADE_PLATFORMER__GRAVITY=2000``.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoopSettings(BaseModel):
    """Frame clock settings."""

    # Longest simulated step; larger wall-clock gaps are clamped to this
    frame_cap: float = Field(default=1.0 / 30.0, gt=0.0)
    fps: int = Field(default=60, gt=0)


class InputSettings(BaseModel):
    """Double-tap and boost timing."""

    double_tap_window_ms: float = Field(default=260.0, gt=0.0)
    dash_cooldown: float = 0.45      # seconds
    dash_duration: float = 0.18      # seconds
    dash_impulse: float = 620.0      # px/s
    jump_boost_cooldown: float = 0.35  # seconds


class ShooterSettings(BaseModel):
    """Fixed shooter playfield and tuning."""

    width: int = 448
    height: int = 512
    lives: int = Field(default=3, ge=1)
    credits: int = Field(default=3, ge=0)
    player_speed: float = 190.0
    player_bullet_speed: float = 360.0
    wave_banner_seconds: float = Field(default=1.2, ge=0.0)


class PlatformerSettings(BaseModel):
    """Physics and economy shared by both platformers."""

    # World
    viewport_width: int = 960
    viewport_height: int = 540
    world_width: int = 3600

    # Player box
    player_width: int = 78
    player_height: int = 96

    # Motion
    gravity: float = 1800.0
    max_fall_speed: float = 900.0
    acceleration: float = 1400.0
    friction: float = 1600.0
    max_speed: float = 300.0
    speed_multiplier: float = 1.5
    jump_velocity: float = -720.0
    boost_jump_velocity: float = -820.0
    wall_slide_speed: float = 140.0
    wall_jump_push: float = 360.0

    # Collision windows
    landing_tolerance: float = 6.0
    enemy_landing_tolerance: float = 8.0
    stomp_min_speed: float = 60.0
    stomp_bounce: float = -480.0
    fall_margin: float = 200.0

    # Floating islands
    ridge_amplitude_ratio: float = Field(default=0.3, ge=0.0, le=1.0)
    ridge_solid_fraction: float = Field(default=0.4, ge=0.0, le=1.0)

    # Session
    lives: int = Field(default=3, ge=1)
    countdown: float = Field(default=120.0, gt=0.0)
    invulnerability: float = 1.0

    # Pickups
    time_bonus: float = 18.0
    speed_duration: float = 8.0
    shield_duration: float = 12.0


class AudioSettings(BaseModel):
    """Tone synthesis settings."""

    enabled: bool = True
    sample_rate: int = 22050
    volume: float = Field(default=0.8, ge=0.0, le=1.0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="RETROCADE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False
    start_game: Literal["shooter", "coin_run", "sky_isles"] = "shooter"

    # Seeds the shooter's enemy fire; None means nondeterministic
    seed: Optional[int] = None

    # Simulator window
    window_scale: int = 1
    fullscreen: bool = False

    # Nested settings
    loop: LoopSettings = Field(default_factory=LoopSettings)
    input: InputSettings = Field(default_factory=InputSettings)
    shooter: ShooterSettings = Field(default_factory=ShooterSettings)
    platformer: PlatformerSettings = Field(default_factory=PlatformerSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
