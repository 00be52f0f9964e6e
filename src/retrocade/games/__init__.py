"""Playable games built on the shared core."""

from retrocade.games.base import BaseGame
from retrocade.games.island import IslandGame
from retrocade.games.platformer import PlatformerGame
from retrocade.games.shooter import ShooterGame

__all__ = ["BaseGame", "ShooterGame", "PlatformerGame", "IslandGame"]
