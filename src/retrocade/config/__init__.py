"""Configuration for RETROCADE."""

from .settings import (
    Settings,
    LoopSettings,
    InputSettings,
    ShooterSettings,
    PlatformerSettings,
    AudioSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "LoopSettings",
    "InputSettings",
    "ShooterSettings",
    "PlatformerSettings",
    "AudioSettings",
    "get_settings",
]
