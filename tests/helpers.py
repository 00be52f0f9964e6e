"""Input and level helpers shared by the game tests."""

from retrocade.core.input import Action, InputEvent
from retrocade.entities import Platform
from retrocade.games.base import BaseGame


def start(game: BaseGame, t: float = 0.0) -> None:
    game.handle_input(InputEvent(Action.START, True, t))
    game.handle_input(InputEvent(Action.START, False, t + 1))


def press(game: BaseGame, action: Action, t: float) -> bool:
    return game.handle_input(InputEvent(action, True, t))


def release(game: BaseGame, action: Action, t: float) -> None:
    game.handle_input(InputEvent(action, False, t))


def tap(game: BaseGame, action: Action, t: float) -> bool:
    handled = press(game, action, t)
    release(game, action, t + 10)
    return handled


def empty_level(game, ground: bool = False) -> None:
    """Strip a platformer level down to what a test places itself."""
    level = game.level
    level.platforms = [Platform(0, 460, level.world_width, 80)] if ground else []
    level.enemies = []
    level.hazards = []
    level.collectibles = []
    level.goal = None
