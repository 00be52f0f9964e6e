import json

import pytest

from helpers import empty_level, press, release, tap
from retrocade.core.events import EventType
from retrocade.core.input import Action
from retrocade.core.state import Phase
from retrocade.entities import Collectible, Goal, Hazard, PatrolEnemy
from retrocade.games.platformer import PlatformerGame

FRAME = 1.0 / 30.0


def run(game, seconds: float, dt: float = FRAME) -> None:
    for _ in range(round(seconds / dt)):
        game.update(dt)


def land(game) -> None:
    game.update(FRAME)
    assert game.player.grounded


def walker_at(x: float, floor: float = 460) -> PatrolEnemy:
    return PatrolEnemy(x=x, y=floor - 48, w=48, h=48, vx=0, min_x=x, max_x=x)


# Session flow

def test_intro_blocks_simulation_and_edges(settings):
    game = PlatformerGame(settings)
    assert game.phase == Phase.INTRO
    game.update(1.0)
    assert game.session.timer == 120
    assert not tap(game, Action.JUMP, 0)
    assert not tap(game, Action.RIGHT, 100)
    assert not tap(game, Action.RIGHT, 200)


def test_countdown_runs_while_playing(coin_run):
    run(coin_run, 1.0)
    assert coin_run.session.timer == pytest.approx(119.0)


def test_timer_reaching_zero_ends_the_game(coin_run):
    coin_run.session.timer = 0.01
    coin_run.update(FRAME)
    assert coin_run.session.timer == 0.0
    assert coin_run.phase == Phase.GAME_OVER
    over = coin_run.event_bus.get_history(EventType.GAME_OVER)
    assert over[0].data["cause"] == "time"


def test_restart_resets_the_session(coin_run):
    s = coin_run.session
    s.coins = 5
    s.lives = 1
    s.timer = 30
    coin_run.level.collectibles[0].collected = True
    coin_run.level.enemies[0].dead = True
    coin_run.player.shield_timer = 4

    assert tap(coin_run, Action.RESTART, 0)
    assert (s.coins, s.lives, s.timer) == (0, 3, 120)
    assert coin_run.level.remaining("coin") == 28
    assert not any(e.dead for e in coin_run.level.enemies)
    assert coin_run.player.shield_timer == 0
    assert (coin_run.player.x, coin_run.player.y) == coin_run.level.spawn
    assert coin_run.phase == Phase.PLAYING


def test_restart_from_game_over(coin_run):
    coin_run.game_over("test")
    tap(coin_run, Action.RESTART, 0)
    assert coin_run.phase == Phase.PLAYING
    assert len(coin_run.event_bus.get_history(EventType.RESTARTED)) == 1


def test_restart_during_intro_stays_in_intro(settings):
    game = PlatformerGame(settings)
    tap(game, Action.RESTART, 0)
    assert game.phase == Phase.INTRO


def test_pause_is_not_offered(coin_run):
    assert not tap(coin_run, Action.PAUSE, 0)
    assert coin_run.phase == Phase.PLAYING


# Movement

def test_spawn_lands_on_the_ground(coin_run):
    land(coin_run)
    assert coin_run.player.bottom == 460


def test_holding_right_runs(coin_run):
    land(coin_run)
    press(coin_run, Action.RIGHT, 0)
    run(coin_run, 1.0)
    p = coin_run.player
    assert p.vx == pytest.approx(300)
    assert p.x > 200
    assert p.grounded
    assert p.anim == "run"
    assert p.facing == 1


def test_ground_jump(coin_run):
    land(coin_run)
    assert tap(coin_run, Action.JUMP, 0)
    assert coin_run.player.vy == -720
    coin_run.update(FRAME)
    assert coin_run.player.bottom < 460
    assert coin_run.player.anim == "jump"


def test_single_airborne_press_does_nothing(coin_run):
    land(coin_run)
    tap(coin_run, Action.JUMP, 0)
    coin_run.update(FRAME)
    vy = coin_run.player.vy
    assert not tap(coin_run, Action.JUMP, 1000)
    assert coin_run.player.vy == vy


def test_double_tap_jump_boosts_in_the_air(coin_run):
    land(coin_run)
    tap(coin_run, Action.JUMP, 0)
    assert tap(coin_run, Action.JUMP, 200)
    p = coin_run.player
    assert p.vy == -820
    assert p.jump_boost_cooldown == pytest.approx(0.35)
    kinds = [e.data["kind"] for e in coin_run.event_bus.get_history(EventType.JUMPED)]
    assert kinds == ["ground", "boost"]


def test_jump_boost_respects_cooldown(coin_run):
    land(coin_run)
    tap(coin_run, Action.JUMP, 0)
    tap(coin_run, Action.JUMP, 200)
    assert not tap(coin_run, Action.JUMP, 400)

    run(coin_run, 0.4)
    assert coin_run.player.jump_boost_cooldown == 0.0
    assert not coin_run.player.grounded
    tap(coin_run, Action.JUMP, 1000)
    assert tap(coin_run, Action.JUMP, 1100)


def test_double_tap_dash(coin_run):
    land(coin_run)
    tap(coin_run, Action.RIGHT, 0)
    assert tap(coin_run, Action.RIGHT, 100)
    p = coin_run.player
    assert p.vx == 620
    assert p.dash_timer == pytest.approx(0.18)
    assert p.dash_cooldown == pytest.approx(0.45)

    # Still dashing, so the next double tap is refused
    assert not tap(coin_run, Action.RIGHT, 200)
    coin_run.update(FRAME)
    assert coin_run.player.vx == 620
    assert len(coin_run.event_bus.get_history(EventType.DASHED)) == 1


def test_dash_cooldown_outlasts_the_dash(coin_run):
    land(coin_run)
    tap(coin_run, Action.LEFT, 0)
    tap(coin_run, Action.LEFT, 100)
    run(coin_run, 0.3)
    p = coin_run.player
    assert not p.dashing
    assert p.dash_cooldown > 0
    tap(coin_run, Action.LEFT, 1000)
    assert not tap(coin_run, Action.LEFT, 1100)

    run(coin_run, 0.2)
    tap(coin_run, Action.RIGHT, 2000)
    assert tap(coin_run, Action.RIGHT, 2100)
    assert coin_run.player.vx == 620


# Enemies and hazards

def test_stomp_defeats_walker_and_bounces(coin_run):
    empty_level(coin_run, ground=True)
    walker = walker_at(300)
    coin_run.level.enemies = [walker]
    coin_run.player.place(290, 412 - 96 - 2)
    coin_run.player.vy = 300

    coin_run.update(1.0 / 60.0)
    assert walker.dead
    assert coin_run.player.vy == -480
    assert coin_run.session.lives == 3


def test_walking_into_walker_costs_a_life(coin_run):
    empty_level(coin_run, ground=True)
    coin_run.level.enemies = [walker_at(300)]
    coin_run.player.place(227, 364)

    coin_run.update(1.0 / 60.0)
    s = coin_run.session
    assert s.lives == 2
    assert s.last_damage == "walker"
    assert (coin_run.player.x, coin_run.player.y) == coin_run.level.spawn


def test_shield_absorbs_then_invulnerability_then_loss(coin_run):
    empty_level(coin_run, ground=True)
    coin_run.level.enemies = [walker_at(300)]
    p = coin_run.player
    p.place(227, 364)
    p.shield_timer = 5.0

    coin_run.update(1.0 / 60.0)
    assert coin_run.session.lives == 3
    assert p.shield_timer == 0.0
    assert p.invuln_timer == pytest.approx(1.0)
    assert len(coin_run.event_bus.get_history(EventType.SHIELD_ABSORBED)) == 1

    coin_run.update(1.0 / 60.0)
    assert coin_run.session.lives == 3

    p.invuln_timer = 0.0
    coin_run.update(1.0 / 60.0)
    assert coin_run.session.lives == 2


def test_spikes_hurt(coin_run):
    empty_level(coin_run, ground=True)
    coin_run.level.hazards = [Hazard(100, 440, 80, 20)]
    coin_run.player.place(80, 364)
    coin_run.update(FRAME)
    assert coin_run.session.lives == 2
    assert coin_run.session.last_damage == "spikes"


def test_falling_out_of_the_world_ignores_the_shield(coin_run):
    empty_level(coin_run)
    p = coin_run.player
    p.place(400, 800)
    p.shield_timer = 5.0
    coin_run.update(FRAME)
    assert coin_run.session.lives == 2
    assert coin_run.session.last_damage == "fall"


def test_losing_the_last_life_ends_the_game(coin_run):
    empty_level(coin_run)
    coin_run.session.lives = 1
    coin_run.player.place(400, 800)
    coin_run.update(FRAME)
    assert coin_run.session.lives == 0
    assert coin_run.phase == Phase.GAME_OVER


# World bounds

def test_player_is_clamped_at_the_world_edge(coin_run):
    empty_level(coin_run, ground=True)
    coin_run.player.place(3500, 364)
    press(coin_run, Action.RIGHT, 0)
    run(coin_run, 0.5)
    release(coin_run, Action.RIGHT, 600)
    assert coin_run.player.x == 3600 - 78
    assert coin_run.session.camera_x == 3600 - 960


# Pickups

def test_coin_counts_and_disappears(coin_run):
    empty_level(coin_run, ground=True)
    coin = Collectible(120, 400)
    coin_run.level.collectibles = [coin]
    coin_run.player.place(80, 364)
    coin_run.update(FRAME)
    coin_run.update(FRAME)
    assert coin.collected
    assert coin_run.session.coins == 1
    assert len(coin_run.event_bus.get_history(EventType.COIN_COLLECTED)) == 1


def test_pickups_apply_effects_without_counting_as_coins(coin_run):
    empty_level(coin_run, ground=True)
    coin_run.level.collectibles = [
        Collectible(120, 400, kind="time"),
        Collectible(120, 400, kind="speed"),
        Collectible(120, 400, kind="shield"),
    ]
    coin_run.player.place(80, 364)
    coin_run.update(FRAME)

    p = coin_run.player
    assert coin_run.session.coins == 0
    assert coin_run.session.timer == pytest.approx(120 - FRAME + 18)
    assert p.speed_timer == 8.0
    assert p.shield_timer == 12.0
    assert len(coin_run.event_bus.get_history(EventType.PICKUP_COLLECTED)) == 3


# Goal

def test_goal_wins_and_lowers_the_flag(coin_run):
    empty_level(coin_run, ground=True)
    coin_run.level.goal = Goal(200, 240, 40, 220)
    coin_run.player.place(150, 364)

    coin_run.update(1.0 / 60.0)
    assert coin_run.phase == Phase.WON
    assert len(coin_run.event_bus.get_history(EventType.WIN)) == 1
    timer = coin_run.session.timer

    coin_run.update(1.0)
    assert coin_run.session.flag_offset == pytest.approx(160)
    assert coin_run.session.victory_timer == pytest.approx(1.0)
    coin_run.update(1.0)
    assert coin_run.session.flag_offset == 220
    assert coin_run.session.timer == timer

    assert not tap(coin_run, Action.JUMP, 0)


def test_snapshot_reports_player(coin_run):
    land(coin_run)
    snap = coin_run.snapshot()
    assert snap["game"] == "coin_run"
    assert (snap["width"], snap["height"]) == (960, 540)
    player = snap["player"]
    assert player["grounded"]
    assert (player["w"], player["h"]) == (78, 96)
    assert player["facing"] == 1
    assert player["shield_timer"] == 0.0
    assert not player["dashing"]
    assert snap["coins_left"] == 28
    assert snap["enemies_alive"] == 5
    assert snap["world_width"] == 3600
    assert snap["goal"]["pole_height"] == 220
    json.dumps(snap)


def test_snapshot_is_enough_to_draw_a_frame(coin_run):
    land(coin_run)
    level = coin_run.level
    level.collectibles[0].collected = True
    level.enemies[0].dead = True
    coin_run.session.camera_x = 700.0

    snap = coin_run.snapshot()
    cam = snap["camera_x"]

    def boxes(kind, items):
        return [(kind, i["x"] - cam, i["y"], i["w"], i["h"]) for i in items]

    draw_list = boxes("platform", snap["platforms"])
    draw_list += boxes("hazard", snap["hazards"])
    draw_list += [("item", c["x"] - cam, c["y"], c["radius"], c["kind"])
                  for c in snap["collectibles"] if not c["collected"]]
    draw_list += boxes("enemy", [e for e in snap["enemies"] if not e["dead"]])
    draw_list += boxes("goal", [snap["goal"]])
    draw_list += boxes("player", [snap["player"]])

    expected = [("platform", p.x - 700, p.y, p.w, p.h) for p in level.platforms]
    expected += [("hazard", h.x - 700, h.y, h.w, h.h) for h in level.hazards]
    expected += [("item", c.x - 700, c.y, c.radius, c.kind)
                 for c in level.collectibles if not c.collected]
    expected += [("enemy", e.x - 700, e.y, e.w, e.h) for e in level.enemies if not e.dead]
    g = level.goal
    expected.append(("goal", g.x - 700, g.y, g.w, g.h))
    p = coin_run.player
    expected.append(("player", p.x - 700, p.y, 78, 96))

    assert draw_list == expected
    assert len([d for d in draw_list if d[0] == "item"]) == len(level.collectibles) - 1
    assert len([d for d in draw_list if d[0] == "enemy"]) == 4
