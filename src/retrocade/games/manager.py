"""Game registry and the active-game switch.

The manager owns exactly one running game at a time. Switching games
builds a fresh instance and moves the audio cues over to its event bus.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Type

from retrocade.audio.cues import AudioCues
from retrocade.audio.engine import AudioEngine
from retrocade.config.settings import Settings, get_settings
from retrocade.core.input import InputEvent
from retrocade.games.base import BaseGame
from retrocade.games.island import IslandGame
from retrocade.games.platformer import PlatformerGame
from retrocade.games.shooter import ShooterGame
from retrocade.graphics.assets import AssetLibrary
from retrocade.graphics.primitives import Buffer

logger = logging.getLogger(__name__)


@dataclass
class GameInfo:
    """Information about a registered game."""

    cls: Type[BaseGame]
    name: str
    display_name: str
    description: str


class GameManager:
    """Registers games, runs the selected one, forwards host calls to it."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        audio: Optional[AudioEngine] = None,
        assets: Optional[AssetLibrary] = None,
    ):
        self.settings = settings or get_settings()
        self.audio = audio
        self.assets = assets or AssetLibrary()

        self._registered: Dict[str, GameInfo] = {}
        self._order: List[str] = []
        self._current: Optional[BaseGame] = None
        self._cues: Optional[AudioCues] = None

    def register_game(self, game_cls: Type[BaseGame]) -> None:
        info = GameInfo(
            cls=game_cls,
            name=game_cls.name,
            display_name=game_cls.display_name,
            description=game_cls.description,
        )
        self._registered[game_cls.name] = info
        if game_cls.name not in self._order:
            self._order.append(game_cls.name)
        logger.info(f"Registered game: {game_cls.name}")

    def get_available_games(self) -> List[GameInfo]:
        return [self._registered[name] for name in self._order]

    @property
    def current(self) -> Optional[BaseGame]:
        return self._current

    def select(self, name: str) -> BaseGame:
        """Replace the running game with a fresh instance of `name`.

        Raises:
            ValueError: If no game is registered under that name
        """
        info = self._registered.get(name)
        if info is None:
            raise ValueError(f"Unknown game: {name!r} (have {', '.join(self._order)})")

        if self._cues is not None:
            self._cues.detach()
            self._cues = None

        game = info.cls(self.settings, self.assets)
        if self.audio is not None:
            self._cues = AudioCues(game.event_bus, self.audio)
        self._current = game
        logger.info(f"Selected game: {name}")
        return game

    def select_index(self, index: int) -> Optional[BaseGame]:
        """Select by registration order; out-of-range indices are ignored."""
        if 0 <= index < len(self._order):
            return self.select(self._order[index])
        return None

    # Host forwarding
    def handle_input(self, event: InputEvent) -> bool:
        if self._current is None:
            return False
        return self._current.handle_input(event)

    def update(self, delta: float) -> None:
        if self._current is not None:
            self._current.update(delta)
        if self.audio is not None:
            self.audio.update(delta)

    def render(self, buffer: Buffer) -> None:
        if self._current is not None:
            self._current.render(buffer)

    def shutdown(self) -> None:
        if self._cues is not None:
            self._cues.detach()
            self._cues = None
        self._current = None


def create_default_manager(
    settings: Optional[Settings] = None,
    audio: Optional[AudioEngine] = None,
    assets: Optional[AssetLibrary] = None,
) -> GameManager:
    """Manager with the three games registered in menu order."""
    manager = GameManager(settings, audio, assets)
    for game_cls in (ShooterGame, PlatformerGame, IslandGame):
        manager.register_game(game_cls)
    return manager
