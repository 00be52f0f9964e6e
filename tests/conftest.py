import random

import pytest

from helpers import start
from retrocade.audio.engine import AudioEngine
from retrocade.config.settings import Settings
from retrocade.games.island import IslandGame
from retrocade.games.platformer import PlatformerGame
from retrocade.games.shooter import ShooterGame


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, seed=1234, audio={"enabled": False})


@pytest.fixture
def silent_audio() -> AudioEngine:
    return AudioEngine(enabled=False)


@pytest.fixture
def shooter(settings) -> ShooterGame:
    game = ShooterGame(settings, rng=random.Random(7))
    start(game)
    return game


@pytest.fixture
def coin_run(settings) -> PlatformerGame:
    game = PlatformerGame(settings)
    start(game)
    return game


@pytest.fixture
def sky_isles(settings) -> IslandGame:
    game = IslandGame(settings)
    start(game)
    return game
