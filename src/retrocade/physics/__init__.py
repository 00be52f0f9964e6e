"""Geometry and collision resolution.

``retrocade.physics.collision`` depends on the entity model, which in turn
uses ``Rect``; import it directly rather than through this package.
"""

from .geometry import Rect, rects_overlap, clamp

__all__ = ["Rect", "rects_overlap", "clamp"]
