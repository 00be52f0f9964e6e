"""Drawing primitives and image assets."""

from .primitives import new_buffer, fill, draw_rect, draw_circle, draw_sprite, draw_text
from .assets import Asset, AssetLibrary

__all__ = [
    "new_buffer",
    "fill",
    "draw_rect",
    "draw_circle",
    "draw_sprite",
    "draw_text",
    "Asset",
    "AssetLibrary",
]
