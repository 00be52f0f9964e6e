import numpy as np
import pytest

from retrocade.config.settings import PlatformerSettings
from retrocade.entities import Bunker, PatrolEnemy, Platform, Player, Projectile
from retrocade.games.shooter import BUNKER_PATTERN
from retrocade.physics.collision import (
    clamp_to_world,
    erode_bunker,
    follow_camera,
    integrate_player,
    resolve_enemies,
    resolve_platforms,
    ridge_height,
    update_wall_slide,
)

DT = 1.0 / 30.0


@pytest.fixture
def cfg() -> PlatformerSettings:
    return PlatformerSettings()


def make_player(x: float, y: float, **kwargs) -> Player:
    return Player(x=x, y=y, w=78, h=96, **kwargs)


def step(player: Player, platforms, cfg, axis: int = 0, dt: float = DT):
    integrate_player(player, axis, dt, cfg)
    return resolve_platforms(player, platforms, cfg)


# Integration

def test_gravity_is_capped(cfg):
    p = make_player(0, 0, vy=cfg.max_fall_speed)
    integrate_player(p, 0, DT, cfg)
    assert p.vy == cfg.max_fall_speed


def test_friction_decays_to_zero(cfg):
    p = make_player(0, 0, vx=20)
    integrate_player(p, 0, DT, cfg)
    assert p.vx == 0.0


def test_speed_pickup_raises_max_speed(cfg):
    p = make_player(0, 0, vx=cfg.max_speed, speed_timer=5)
    for _ in range(30):
        integrate_player(p, 1, DT, cfg)
    assert p.vx == pytest.approx(cfg.max_speed * cfg.speed_multiplier)


def test_dash_overrides_horizontal_speed(cfg):
    p = make_player(0, 0, dash_timer=0.1, dash_dir=-1)
    integrate_player(p, 1, DT, cfg, dash_speed=620)
    assert p.vx == -620


# Platform landing

@pytest.mark.parametrize("fall_speed", [0.0, 300.0, 600.0, 900.0])
@pytest.mark.parametrize("prev_offset", [-2.0, 0.0, 5.0])
def test_landing_within_tolerance_never_tunnels(cfg, fall_speed, prev_offset):
    thin = Platform(0, 400, 500, 10)
    p = make_player(100, 400 + prev_offset - 96, vy=fall_speed)
    support = step(p, [thin], cfg)
    assert support is thin
    assert p.bottom == pytest.approx(400)
    assert p.vy == 0.0
    assert p.grounded


def test_no_landing_while_rising(cfg):
    ledge = Platform(0, 400, 500, 28)
    p = make_player(100, 300, vy=-400)
    support = resolve_platforms(p, [ledge], cfg)
    assert support is None
    assert not p.grounded
    assert p.vy == -400


def test_corner_landing_is_not_ejected_sideways(cfg):
    block = Platform(300, 400, 200, 40)
    p = make_player(250, 400 - 96 - 2, vy=300)
    step(p, [block], cfg)
    assert p.grounded
    assert p.x == pytest.approx(250)


def test_side_hit_from_the_left_uses_previous_edge(cfg):
    wall = Platform(300, 300, 60, 200)
    p = make_player(230, 350)
    p.prev_x, p.prev_y = 220, 350
    resolve_platforms(p, [wall], cfg)
    assert p.x == 300 - 78
    assert p.wall_contact == 1


def test_side_hit_from_the_right(cfg):
    wall = Platform(300, 300, 60, 200)
    p = make_player(355, 350, vx=-200)
    p.prev_x, p.prev_y = 362, 350
    resolve_platforms(p, [wall], cfg)
    assert p.x == 360
    assert p.vx == 0.0
    assert p.wall_contact == -1


def test_head_bonk(cfg):
    ledge = Platform(0, 200, 500, 28)
    p = make_player(100, 220, vy=-500)
    p.prev_x, p.prev_y = 100, 230
    resolve_platforms(p, [ledge], cfg)
    assert p.y == 228
    assert p.vy == 0.0


# Ridge islands

def test_ridge_height_profile():
    island = Platform(100, 200, 400, 100, ridge=True)
    amplitude = 30.0
    assert ridge_height(island, 100, 0.3) == pytest.approx(200 + amplitude)
    assert ridge_height(island, 300, 0.3) == pytest.approx(200 + amplitude - amplitude * 0.85)
    assert ridge_height(island, 500, 0.3) == pytest.approx(200 + amplitude)
    # Outside the span the edge value holds
    assert ridge_height(island, 0, 0.3) == pytest.approx(200 + amplitude)


def test_landing_samples_ridge_at_centre(cfg):
    island = Platform(100, 200, 400, 100, ridge=True)
    surface = ridge_height(island, 300, cfg.ridge_amplitude_ratio)
    p = make_player(300 - 39, 200 - 96, vy=300)
    step(p, [island], cfg, dt=1.0 / 60.0)
    assert p.grounded
    assert p.bottom == pytest.approx(surface)


def test_ridge_band_is_not_solid(cfg):
    island = Platform(100, 200, 400, 100, ridge=True)
    p = make_player(261, 120, vy=-100)
    p.prev_x, p.prev_y = 261, 120
    resolve_platforms(p, [island], cfg)
    assert (p.x, p.y) == (261, 120)


def test_grounded_player_climbs_a_rise_steeper_than_the_tolerance(cfg):
    island = Platform(2500, 330, 360, 80, ridge=True)
    p = make_player(2502 - 39, ridge_height(island, 2502, 0.3) - 96)
    p.grounded = True
    p.dash_timer, p.dash_dir = 0.18, 1
    integrate_player(p, 0, DT, cfg, dash_speed=620)
    surface = ridge_height(island, p.center_x, 0.3)
    assert ridge_height(island, 2502, 0.3) - surface > cfg.landing_tolerance

    assert resolve_platforms(p, [island], cfg) is island
    assert p.grounded
    assert p.bottom == pytest.approx(surface)
    assert p.x == pytest.approx(2463 + 620 * DT)


def test_walking_off_a_ridge_end_drops_clear_of_the_rock(cfg):
    island = Platform(100, 200, 400, 100, ridge=True)
    # Centre is past the right end, box still overlaps the rock body
    p = make_player(470, 150, vy=300)
    p.prev_x, p.prev_y = 470, 140
    resolve_platforms(p, [island], cfg)
    assert p.x == 500
    assert not p.grounded


# Wall slide

def test_wall_slide_caps_descent(cfg):
    p = make_player(0, 0, vy=500)
    p.wall_contact = 1
    update_wall_slide(p, 1, cfg)
    assert p.wall_slide
    assert p.wall_dir == 1
    assert p.vy == cfg.wall_slide_speed


def test_wall_slide_requires_pushing_into_the_wall(cfg):
    p = make_player(0, 0, vy=500)
    p.wall_contact = 1
    update_wall_slide(p, 0, cfg)
    assert not p.wall_slide
    assert p.vy == 500


# Enemies

def test_standable_enemy_carries_the_player(cfg):
    golem = PatrolEnemy(x=300, y=400, w=100, h=30, vx=60, min_x=0, max_x=1000,
                        standable=True, hazardous=False, stompable=False)
    p = make_player(310, 400 - 96)
    integrate_player(p, 0, 0.1, cfg)
    contacts = resolve_enemies(p, [golem], 0.1, cfg)
    assert [c.kind for c in contacts] == ["top"]
    assert p.grounded
    assert p.bottom == 400
    assert p.x == pytest.approx(316)


def test_standable_enemy_tolerance_is_wider_than_platforms(cfg):
    golem = PatrolEnemy(x=300, y=400, w=100, h=30, vx=0, min_x=300, max_x=300,
                        standable=True, hazardous=False, stompable=False)
    p = make_player(310, 400 + 7 - 96, vy=100)
    p.prev_y = p.y
    p.y += 2
    contacts = resolve_enemies(p, [golem], DT, cfg)
    assert contacts[0].kind == "top"


def test_standable_enemy_blocks_sides(cfg):
    golem = PatrolEnemy(x=300, y=380, w=64, h=64, vx=0, min_x=300, max_x=300,
                        standable=True, hazardous=False, stompable=False)
    p = make_player(226, 360)
    p.prev_x, p.prev_y = 221, 360
    contacts = resolve_enemies(p, [golem], DT, cfg)
    assert contacts[0].kind == "side"
    assert p.x == 300 - 78


def test_standable_enemy_blocks_from_below(cfg):
    cloud = PatrolEnemy(x=300, y=200, w=110, h=26, vx=0, min_x=300, max_x=300,
                        standable=True, hazardous=False, stompable=False)
    p = make_player(310, 220, vy=-400)
    p.prev_x, p.prev_y = 310, 230
    contacts = resolve_enemies(p, [cloud], DT, cfg)
    assert contacts[0].kind == "under"
    assert p.y == 226
    assert p.vy == 0.0


def test_fast_landing_stomps(cfg):
    walker = PatrolEnemy(x=300, y=400, w=48, h=48, vx=0, min_x=300, max_x=300)
    p = make_player(290, 400 - 96 - 2, vy=300)
    integrate_player(p, 0, 1.0 / 60.0, cfg)
    contacts = resolve_enemies(p, [walker], 1.0 / 60.0, cfg)
    assert [c.kind for c in contacts] == ["stomp"]


def test_slow_contact_is_a_hit(cfg):
    walker = PatrolEnemy(x=300, y=400, w=48, h=48, vx=0, min_x=300, max_x=300)
    p = make_player(227, 352)
    integrate_player(p, 0, 1.0 / 60.0, cfg)
    contacts = resolve_enemies(p, [walker], 1.0 / 60.0, cfg)
    assert [c.kind for c in contacts] == ["hit"]


def test_dead_enemies_are_ignored(cfg):
    walker = PatrolEnemy(x=300, y=400, w=48, h=48, vx=0, min_x=300, max_x=300, dead=True)
    p = make_player(290, 380)
    assert resolve_enemies(p, [walker], DT, cfg) == []


# World bounds and camera

def test_one_frame_near_the_edge_stays_inside_world(cfg):
    p = make_player(3450, 0, vx=300)
    integrate_player(p, 1, 0.033, cfg)
    clamp_to_world(p, 3600)
    assert p.x == pytest.approx(3459.9)
    assert 0 <= p.x <= 3600 - 78


def test_overshoot_is_clamped_to_world_edge(cfg):
    p = make_player(3500, 0, vx=300)
    integrate_player(p, 1, 0.1, cfg)
    clamp_to_world(p, 3600)
    assert p.x == 3522


def test_left_edge_clamp(cfg):
    p = make_player(5, 0, vx=-300)
    integrate_player(p, -1, 0.1, cfg)
    clamp_to_world(p, 3600)
    assert p.x == 0
    assert p.vx == 0


def test_camera_stays_within_world():
    assert follow_camera(make_player(0, 0), 960, 3600) == 0
    assert follow_camera(make_player(3522, 0), 960, 3600) == 3600 - 960
    mid = follow_camera(make_player(1500, 0), 960, 3600)
    assert mid == pytest.approx(1539 - 960 * 0.4)


# Bunker erosion

def make_bunker() -> Bunker:
    return Bunker.from_pattern(100, 300, BUNKER_PATTERN)


def test_upward_shot_erodes_from_the_bottom():
    bunker = make_bunker()
    shot = Projectile(x=104, y=325, vy=-360, from_player=True)
    assert erode_bunker([bunker], shot, 2) is bunker
    assert bunker.cells[6:8, 0:3].tolist() == [[0, 0, 0], [0, 0, 0]]
    assert bunker.cells.min() >= 0


def test_eroded_cells_stop_blocking():
    bunker = make_bunker()
    shot = Projectile(x=104, y=325, vy=-360, from_player=True)
    erode_bunker([bunker], shot, 2)
    assert erode_bunker([bunker], Projectile(x=104, y=325, vy=-360), 2) is None


def test_shot_through_the_arch_passes():
    bunker = make_bunker()
    before = bunker.cells.copy()
    shot = Projectile(x=124, y=325, vy=-360, from_player=True)
    assert erode_bunker([bunker], shot, 2) is None
    assert np.array_equal(bunker.cells, before)


def test_downward_shot_erodes_from_the_top():
    bunker = make_bunker()
    shot = Projectile(x=104, y=296, vy=222)
    assert erode_bunker([bunker], shot, 1) is bunker
    assert bunker.cells[1, 1] == 1
    assert bunker.cells[0, 2] == 1
    assert bunker.cells[2, 0] == 1
    assert bunker.cells.min() >= 0


def test_durability_floors_at_zero():
    bunker = make_bunker()
    shot = Projectile(x=140, y=300, vy=222)
    for _ in range(5):
        erode_bunker([bunker], shot, 2)
    assert bunker.cells.min() == 0
