"""Image assets as readiness-polled handles.

Loading never blocks a frame and never raises into the game: a missing
or undecodable file simply stays not-ready and the renderer draws a
primitive placeholder instead.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


@dataclass
class Asset:
    """An image that may or may not have finished loading."""
    name: str
    path: Optional[Path] = None
    pixels: Optional[NDArray[np.uint8]] = field(default=None, repr=False)
    failed: bool = False

    @property
    def ready(self) -> bool:
        return self.pixels is not None

    def load(self, size: Optional[tuple[int, int]] = None) -> bool:
        """Decode the image to RGBA pixels. Returns readiness."""
        if self.ready or self.failed or self.path is None:
            return self.ready
        try:
            with Image.open(self.path) as image:
                image = image.convert("RGBA")
                if size is not None:
                    image = image.resize(size, Image.Resampling.NEAREST)
                self.pixels = np.asarray(image, dtype=np.uint8).copy()
            logger.debug(f"Asset ready: {self.name}")
        except (OSError, ValueError, UnidentifiedImageError) as e:
            self.failed = True
            logger.warning(f"Asset {self.name} unavailable ({self.path}): {e}")
        return self.ready


class AssetLibrary:
    """Named assets; unknown names come back as never-ready handles."""

    def __init__(self, root: Optional[Path] = None):
        self.root = root
        self._assets: Dict[str, Asset] = {}

    def register(self, name: str, filename: str,
                 size: Optional[tuple[int, int]] = None) -> Asset:
        path = self.root / filename if self.root is not None else Path(filename)
        asset = Asset(name=name, path=path)
        self._assets[name] = asset
        asset.load(size)
        return asset

    def get(self, name: str) -> Asset:
        asset = self._assets.get(name)
        if asset is None:
            asset = Asset(name=name)
            self._assets[name] = asset
        return asset

    def is_ready(self, name: str) -> bool:
        return self.get(name).ready
