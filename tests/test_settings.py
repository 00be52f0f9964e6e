import pytest
from pydantic import ValidationError

from retrocade.config.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.start_game == "shooter"
    assert settings.loop.frame_cap == pytest.approx(1.0 / 30.0)
    assert settings.input.double_tap_window_ms == 260
    assert settings.shooter.credits == 3
    assert settings.platformer.landing_tolerance == 6
    assert settings.platformer.enemy_landing_tolerance == 8
    assert settings.platformer.countdown == 120
    assert settings.seed is None


def test_nested_environment_override(monkeypatch):
    monkeypatch.setenv("RETROCADE_PLATFORMER__GRAVITY", "2000")
    monkeypatch.setenv("RETROCADE_START_GAME", "sky_isles")
    settings = Settings(_env_file=None)
    assert settings.platformer.gravity == 2000
    assert settings.start_game == "sky_isles"


def test_frame_cap_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, loop={"frame_cap": 0})


def test_unknown_start_game_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, start_game="pong")


def test_ridge_ratio_is_bounded():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, platformer={"ridge_amplitude_ratio": 1.5})
