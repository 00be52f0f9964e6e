"""Motion integration and collision resolution.

All functions mutate the entities they are given and return what was hit;
none of them raise. Resolution always compares against where the player
was at the start of the step (prev_x/prev_y) so that the side of approach,
not the depth of the current overlap, decides how a hit is resolved.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from retrocade.config.settings import PlatformerSettings
from retrocade.entities import Bunker, PatrolEnemy, Platform, Player, Projectile
from retrocade.physics.geometry import clamp, rects_overlap, spans_overlap

# Snapped edges accumulate float error; treat this much as touching
EDGE_SLOP = 0.5

RIDGE_PRIMARY = 0.85
RIDGE_SECONDARY = 0.35


@dataclass
class EnemyContact:
    enemy: PatrolEnemy
    kind: str  # top, side, under, stomp, hit


def integrate_player(
    player: Player,
    axis: int,
    dt: float,
    cfg: PlatformerSettings,
    dash_speed: float = 0.0,
) -> None:
    """Apply input acceleration, friction and gravity, then move.

    Args:
        player: Player to advance
        axis: Held horizontal direction (-1, 0, +1)
        dt: Step in seconds
        cfg: Platformer physics constants
        dash_speed: Horizontal speed forced while a dash is active
    """
    player.prev_x = player.x
    player.prev_y = player.y

    max_speed = cfg.max_speed
    if player.speed_timer > 0:
        max_speed *= cfg.speed_multiplier

    if player.dashing:
        player.vx = player.dash_dir * max(dash_speed, max_speed)
    else:
        if axis != 0:
            player.vx += axis * cfg.acceleration * dt
            player.facing = axis
        elif player.vx > 0:
            player.vx = max(0.0, player.vx - cfg.friction * dt)
        elif player.vx < 0:
            player.vx = min(0.0, player.vx + cfg.friction * dt)
        player.vx = clamp(player.vx, -max_speed, max_speed)

    player.vy = min(cfg.max_fall_speed, player.vy + cfg.gravity * dt)
    if player.wall_slide:
        player.vy = min(player.vy, cfg.wall_slide_speed)

    player.x += player.vx * dt
    player.y += player.vy * dt


def ridge_height(platform: Platform, x: float, amplitude_ratio: float) -> float:
    """Surface y of a floating island at world x.

    The waveform is sampled across the platform span; outside the span the
    edge value is used. The crest sits roughly at the box top and the ends
    sit one amplitude below it.
    """
    amplitude = platform.h * amplitude_ratio
    t = clamp((x - platform.x) / platform.w, 0.0, 1.0) if platform.w > 0 else 0.0
    ridge_base = platform.y + amplitude
    return (
        ridge_base
        - amplitude * math.sin(t * math.pi) * RIDGE_PRIMARY
        - amplitude * math.sin(t * math.pi * 2) * RIDGE_SECONDARY
    )


def surface_at(platform: Platform, x: float, amplitude_ratio: float) -> float:
    if platform.ridge:
        return ridge_height(platform, x, amplitude_ratio)
    return platform.y


def _stand_on(player: Player, surface: float) -> None:
    player.y = surface - player.h
    player.vy = 0.0
    player.grounded = True


def resolve_platforms(
    player: Player,
    platforms: Iterable[Platform],
    cfg: PlatformerSettings,
) -> Optional[Platform]:
    """Land on, or get blocked by, static platforms.

    Returns:
        The platform the player is standing on after resolution, if any
    """
    platforms = list(platforms)
    was_grounded = player.grounded
    player.grounded = False
    player.wall_contact = 0

    tol = cfg.landing_tolerance
    support: Optional[Platform] = None

    for platform in platforms:
        if platform.ridge:
            # Ridges are sampled at the player's centre line
            if not (platform.x <= player.center_x <= platform.x + platform.w):
                continue
        elif not spans_overlap(player.x, player.x + player.w,
                               platform.x, platform.x + platform.w):
            continue

        surface = surface_at(platform, player.center_x, cfg.ridge_amplitude_ratio)
        prev_bottom = player.prev_y + player.h

        if player.vy < 0:
            continue
        if prev_bottom <= surface + tol and player.bottom >= surface:
            _stand_on(player, surface)
            support = platform
        elif platform.ridge and was_grounded:
            # Keep following the slope the player stood on last step, however
            # far it rose or fell under them at this horizontal speed
            prev_surface = surface_at(platform, player.prev_x + player.w / 2,
                                      cfg.ridge_amplitude_ratio)
            drop = max(0.0, surface - prev_surface)
            if (abs(prev_bottom - prev_surface) <= tol
                    and player.bottom >= surface - tol - drop):
                _stand_on(player, surface)
                support = platform

    for platform in platforms:
        if platform is support:
            continue
        rect = platform.rect
        if not rects_overlap(player.rect, rect):
            continue
        if platform.ridge and player.bottom <= platform.y + platform.h * cfg.ridge_solid_fraction:
            # Inside the ridge band is open air above the sampled surface
            continue

        if player.prev_x + player.w <= rect.x + EDGE_SLOP:
            player.x = rect.x - player.w
            player.vx = min(0.0, player.vx)
            player.wall_contact = 1
        elif player.prev_x >= rect.right - EDGE_SLOP:
            player.x = rect.right
            player.vx = max(0.0, player.vx)
            player.wall_contact = -1
        elif player.vy < 0 and player.prev_y >= rect.bottom - EDGE_SLOP:
            player.y = rect.bottom
            player.vy = 0.0
        elif player.center_x < rect.x + rect.w / 2:
            # Dropped past a ridge end while still overlapping the box
            player.x = rect.x - player.w
            player.wall_contact = 1
        else:
            player.x = rect.right
            player.wall_contact = -1

    return support


def update_wall_slide(player: Player, axis: int, cfg: PlatformerSettings) -> None:
    """Airborne, falling, touching a wall and pushing into it caps descent."""
    touching = player.wall_contact
    if not player.grounded and player.vy > 0 and touching != 0 and axis == touching:
        player.wall_slide = True
        player.wall_dir = touching
        player.vy = min(player.vy, cfg.wall_slide_speed)
    else:
        player.wall_slide = False
        player.wall_dir = 0


def step_patrol(enemy: PatrolEnemy, dt: float) -> None:
    """Walk between patrol bounds, turning around at either end."""
    if enemy.dead:
        return
    enemy.x += enemy.vx * dt
    if enemy.x < enemy.min_x:
        enemy.x = enemy.min_x
        enemy.vx = abs(enemy.vx)
    elif enemy.x > enemy.max_x:
        enemy.x = enemy.max_x
        enemy.vx = -abs(enemy.vx)


def resolve_enemies(
    player: Player,
    enemies: Iterable[PatrolEnemy],
    dt: float,
    cfg: PlatformerSettings,
) -> List[EnemyContact]:
    """Classify player/enemy contacts, resolving the standable ones.

    Standable enemies behave like moving platforms: landing on top gives
    support and carries the player along, the sides and the underside block.
    Other enemies are only classified (stomp or hit); the caller decides
    what a hit costs.
    """
    contacts: List[EnemyContact] = []
    tol = cfg.enemy_landing_tolerance

    for enemy in enemies:
        if enemy.dead:
            continue

        prev_bottom = player.prev_y + player.h
        horizontal = spans_overlap(player.x, player.x + player.w,
                                   enemy.x, enemy.x + enemy.w)

        if enemy.standable:
            if (horizontal and player.vy >= 0
                    and prev_bottom <= enemy.y + tol and player.bottom >= enemy.y):
                _stand_on(player, enemy.y)
                player.x += enemy.vx * dt
                contacts.append(EnemyContact(enemy, "top"))
                continue

            if not rects_overlap(player.rect, enemy.rect):
                continue

            enemy_prev_x = enemy.x - enemy.vx * dt
            if player.prev_x + player.w <= enemy_prev_x + EDGE_SLOP:
                player.x = enemy.x - player.w
                player.vx = min(0.0, player.vx)
                player.wall_contact = 1
                contacts.append(EnemyContact(enemy, "side"))
            elif player.prev_x >= enemy_prev_x + enemy.w - EDGE_SLOP:
                player.x = enemy.x + enemy.w
                player.vx = max(0.0, player.vx)
                player.wall_contact = -1
                contacts.append(EnemyContact(enemy, "side"))
            elif player.vy < 0 and player.prev_y >= enemy.y + enemy.h - EDGE_SLOP:
                player.y = enemy.y + enemy.h
                player.vy = 0.0
                contacts.append(EnemyContact(enemy, "under"))
            else:
                contacts.append(EnemyContact(enemy, "hit"))
            continue

        if not rects_overlap(player.rect, enemy.rect):
            continue
        if (enemy.stompable and player.vy >= cfg.stomp_min_speed
                and prev_bottom <= enemy.y + tol):
            contacts.append(EnemyContact(enemy, "stomp"))
        else:
            contacts.append(EnemyContact(enemy, "hit"))

    return contacts


def clamp_to_world(player: Player, world_width: float) -> None:
    """Keep the player box inside [0, world_width - w]."""
    limit = world_width - player.w
    if player.x < 0:
        player.x = 0.0
        player.vx = max(0.0, player.vx)
    elif player.x > limit:
        player.x = limit
        player.vx = min(0.0, player.vx)


def follow_camera(
    player: Player,
    viewport_width: float,
    world_width: float,
    lead: float = 0.4,
) -> float:
    """Camera x keeping the player at `lead` of the viewport, within the world."""
    target = player.center_x - viewport_width * lead
    return clamp(target, 0.0, max(0.0, world_width - viewport_width))


def erode_bunker(
    bunkers: Iterable[Bunker],
    projectile: Projectile,
    power: int,
) -> Optional[Bunker]:
    """Damage the first bunker whose solid cells the projectile touches.

    A 3x3 block of cells around the impact cell loses `power` durability,
    floored at zero. Cells already at zero let projectiles through.

    Returns:
        The bunker that absorbed the projectile, or None
    """
    for bunker in bunkers:
        if not rects_overlap(projectile.rect, bunker.rect):
            continue

        rows, cols = bunker.cells.shape
        scale = bunker.scale
        col_lo = max(0, int(math.floor((projectile.x - bunker.x) / scale)))
        col_hi = min(cols - 1, int(math.floor((projectile.x + projectile.w - bunker.x) / scale - 1e-9)))
        row_lo = max(0, int(math.floor((projectile.y - bunker.y) / scale)))
        row_hi = min(rows - 1, int(math.floor((projectile.y + projectile.h - bunker.y) / scale - 1e-9)))
        if col_lo > col_hi or row_lo > row_hi:
            continue

        footprint = bunker.cells[row_lo:row_hi + 1, col_lo:col_hi + 1]
        solid = np.argwhere(footprint > 0)
        if solid.size == 0:
            continue

        # Leading edge: upward shots strike the lowest solid cell first
        if projectile.vy < 0:
            hit_row, hit_col = solid[np.argmax(solid[:, 0])]
        else:
            hit_row, hit_col = solid[np.argmin(solid[:, 0])]
        impact_row = row_lo + int(hit_row)
        impact_col = col_lo + int(hit_col)

        r0, r1 = max(0, impact_row - 1), min(rows, impact_row + 2)
        c0, c1 = max(0, impact_col - 1), min(cols, impact_col + 2)
        block = bunker.cells[r0:r1, c0:c1]
        np.maximum(block - power, 0, out=block)
        return bunker

    return None
