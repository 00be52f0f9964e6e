"""
Coin Run - side-scrolling platformer.

Run right across a wide world against a countdown: collect coins and
pickups, stomp walkers, avoid spikes and pits, and touch the goal pole.
The island variant reuses all of this with a different level and enemy mix.
"""

import logging
from typing import Any, Dict, Optional

from retrocade.config.settings import Settings
from retrocade.core.events import EventType
from retrocade.core.input import Action, Press
from retrocade.core.state import Phase
from retrocade.entities import Collectible, PatrolEnemy, Player
from retrocade.games.base import BaseGame, entity_state
from retrocade.games.levels import Level, build_coin_run
from retrocade.graphics.assets import AssetLibrary
from retrocade.graphics.primitives import (
    Buffer,
    draw_circle,
    draw_image,
    draw_rect,
    fill,
)
from retrocade.physics.collision import (
    clamp_to_world,
    follow_camera,
    integrate_player,
    resolve_enemies,
    resolve_platforms,
    step_patrol,
    update_wall_slide,
)
from retrocade.physics.geometry import rects_overlap

logger = logging.getLogger(__name__)


SKY = (92, 148, 252)
GROUND = (200, 76, 12)
GROUND_TOP = (0, 168, 0)
LEDGE = (228, 92, 16)
SPIKES = (188, 188, 188)
WALKER = (136, 20, 0)
PLAYER = (216, 40, 0)
SHIELD_RING = (120, 220, 255)
POLE = (220, 220, 220)
FLAG = (0, 200, 60)

PICKUP_COLORS = {
    "coin": (252, 188, 60),
    "time": (120, 220, 255),
    "speed": (255, 120, 200),
    "shield": (160, 255, 160),
}

RUN_THRESHOLD = 0.75
WALK_THRESHOLD = 5.0


class PlatformerGame(BaseGame):
    """Countdown platformer with stomps, pickups and a goal."""

    name = "coin_run"
    display_name = "COIN RUN"
    description = "Grab the coins and reach the flag before time runs out"

    sky_color = SKY

    FLAG_LOWER_SPEED = 160.0  # px/s
    CAMERA_LEAD = 0.4

    def __init__(self, settings: Optional[Settings] = None,
                 assets: Optional[AssetLibrary] = None):
        super().__init__(settings, assets)
        self.cfg = self.settings.platformer
        self.level: Level = self.build_level()
        spawn_x, spawn_y = self.level.spawn
        self.player = Player(x=spawn_x, y=spawn_y,
                             w=self.cfg.player_width, h=self.cfg.player_height)
        self._reset_session()

    @property
    def width(self) -> int:
        return self.cfg.viewport_width

    @property
    def height(self) -> int:
        return self.cfg.viewport_height

    def build_level(self) -> Level:
        return build_coin_run(self.cfg)

    def _reset_session(self) -> None:
        s = self.session
        s.lives = self.cfg.lives
        s.timer = self.cfg.countdown
        s.coins = 0
        s.score = 0
        s.victory_timer = 0.0
        s.flag_offset = 0.0
        s.last_damage = None
        self.level = self.build_level()
        self._respawn()

    def _respawn(self) -> None:
        self.player.place(*self.level.spawn)
        self.player.clear_effects()
        self.session.camera_x = follow_camera(
            self.player, self.width, self.level.world_width, self.CAMERA_LEAD)

    def on_restart(self) -> None:
        self._reset_session()

    # Input
    def on_action(self, action: Action, press: Press, timestamp_ms: float) -> bool:
        if self.phase != Phase.PLAYING:
            return False
        if action == Action.JUMP:
            return self.jump(press)
        if action in (Action.LEFT, Action.RIGHT) and press.double_tap:
            return self.dash(-1 if action == Action.LEFT else 1)
        return False

    def jump(self, press: Press) -> bool:
        """Ground jump, wall jump, or an airborne double-tap boost."""
        p = self.player
        cfg = self.cfg
        if p.grounded:
            p.vy = cfg.jump_velocity
            p.grounded = False
            self.emit(EventType.JUMPED, kind="ground")
            return True
        if p.wall_slide:
            p.vy = cfg.jump_velocity
            p.vx = -p.wall_dir * cfg.wall_jump_push
            p.facing = -p.wall_dir
            p.wall_slide = False
            p.wall_dir = 0
            self.emit(EventType.JUMPED, kind="wall")
            return True
        if press.double_tap and p.jump_boost_cooldown == 0.0:
            p.vy = cfg.boost_jump_velocity
            p.jump_boost_cooldown = self.settings.input.jump_boost_cooldown
            self.emit(EventType.JUMPED, kind="boost")
            return True
        return False

    def dash(self, direction: int) -> bool:
        """Arm a horizontal dash unless one is active or cooling down."""
        p = self.player
        if p.dashing or p.dash_cooldown > 0:
            return False
        tuning = self.settings.input
        p.dash_timer = tuning.dash_duration
        p.dash_cooldown = tuning.dash_cooldown
        p.dash_dir = direction
        p.facing = direction
        p.vx = direction * tuning.dash_impulse
        self.emit(EventType.DASHED, direction=direction)
        return True

    # Simulation
    def on_update(self, delta: float) -> None:
        s = self.session
        if self.phase == Phase.WON:
            s.victory_timer += delta
            pole = self.level.goal.pole_height if self.level.goal else 0.0
            s.flag_offset = min(pole, s.flag_offset + self.FLAG_LOWER_SPEED * delta)
            return
        if self.phase != Phase.PLAYING:
            return

        s.timer = max(0.0, s.timer - delta)
        if s.timer == 0.0:
            self.game_over("time")
            return

        p = self.player
        cfg = self.cfg
        p.tick_effects(delta)
        for enemy in self.level.enemies:
            step_patrol(enemy, delta)

        axis = self.input.horizontal_axis()
        integrate_player(p, axis, delta, cfg, dash_speed=self.settings.input.dash_impulse)
        resolve_platforms(p, self.level.platforms, cfg)
        contacts = resolve_enemies(p, self.level.enemies, delta, cfg)
        update_wall_slide(p, axis, cfg)
        clamp_to_world(p, self.level.world_width)

        lives_before = s.lives
        for contact in contacts:
            self._on_enemy_contact(contact.enemy, contact.kind)
            if s.lives != lives_before or self.phase != Phase.PLAYING:
                return

        for hazard in self.level.hazards:
            if rects_overlap(p.rect, hazard.rect):
                self.take_hit(hazard.kind)
                if s.lives != lives_before or self.phase != Phase.PLAYING:
                    return

        for item in self.level.collectibles:
            if not item.collected and rects_overlap(p.rect, item.rect):
                self._collect(item)

        goal = self.level.goal
        if goal is not None and rects_overlap(p.rect, goal.rect):
            self._win()
            return

        if p.y > cfg.viewport_height + cfg.fall_margin:
            self.lose_life("fall")
            return

        self._update_animation()
        s.camera_x = follow_camera(p, self.width, self.level.world_width, self.CAMERA_LEAD)

    def _on_enemy_contact(self, enemy: PatrolEnemy, kind: str) -> None:
        if kind == "stomp":
            enemy.dead = True
            self.player.vy = self.cfg.stomp_bounce
            self.player.grounded = False
            self.emit(EventType.ENEMY_DESTROYED, kind=enemy.kind)
        elif kind == "top":
            return
        elif enemy.hazardous:
            self.take_hit(enemy.kind)

    def take_hit(self, cause: str) -> bool:
        """Hazard contact: absorbed by shield or invulnerability, else a life.

        Returns:
            True if a life was lost
        """
        p = self.player
        if p.invuln_timer > 0:
            return False
        if p.shield_timer > 0:
            p.shield_timer = 0.0
            p.invuln_timer = self.cfg.invulnerability
            self.emit(EventType.SHIELD_ABSORBED, cause=cause)
            return False
        self.lose_life(cause)
        return True

    def lose_life(self, cause: str) -> None:
        s = self.session
        s.lives = max(0, s.lives - 1)
        s.last_damage = cause
        logger.debug(f"{self.name}: life lost to {cause}, {s.lives} left")
        self.emit(EventType.LIFE_LOST, lives=s.lives, cause=cause)
        if s.lives == 0:
            self.game_over(cause)
        else:
            self._respawn()

    def _collect(self, item: Collectible) -> None:
        item.collected = True
        s = self.session
        p = self.player
        if item.kind == "coin":
            s.coins += 1
            self.emit(EventType.COIN_COLLECTED, coins=s.coins)
            return

        if item.kind == "time":
            s.timer += self.cfg.time_bonus
        elif item.kind == "speed":
            p.speed_timer = self.cfg.speed_duration
        elif item.kind == "shield":
            p.shield_timer = self.cfg.shield_duration
        self.emit(EventType.PICKUP_COLLECTED, kind=item.kind)

    def _win(self) -> None:
        s = self.session
        s.victory_timer = 0.0
        s.flag_offset = 0.0
        self.player.vx = 0.0
        if self.phases.transition(Phase.WON):
            logger.info(f"{self.name}: goal reached with {s.coins} coins")
            self.emit(EventType.WIN, coins=s.coins, time_left=s.timer)

    def _update_animation(self) -> None:
        p = self.player
        speed = abs(p.vx)
        if not p.grounded:
            p.anim = "jump"
        elif speed > self.cfg.max_speed * RUN_THRESHOLD:
            p.anim = "run"
        elif speed > WALK_THRESHOLD:
            p.anim = "walk"
        else:
            p.anim = "idle"

    # Presentation
    def hud_text(self) -> str:
        s = self.session
        return f"COINS {s.coins}  LIVES {s.lives}  TIME {int(s.timer)}"

    def overlay_text(self) -> tuple[str, str]:
        if self.phase == Phase.WON:
            return "GOAL!", f"COINS {self.session.coins}  R TO PLAY AGAIN"
        return super().overlay_text()

    def render_main(self, buffer: Buffer) -> None:
        cam = self.session.camera_x
        fill(buffer, self.sky_color)
        self.draw_terrain(buffer, cam)

        for hazard in self.level.hazards:
            draw_rect(buffer, hazard.x - cam, hazard.y, hazard.w, hazard.h, SPIKES)
        for item in self.level.collectibles:
            if not item.collected:
                draw_circle(buffer, item.x - cam, item.y, item.radius, PICKUP_COLORS[item.kind])
        for enemy in self.level.enemies:
            if not enemy.dead:
                self.draw_enemy(buffer, enemy, cam)

        goal = self.level.goal
        if goal is not None:
            draw_rect(buffer, goal.x - cam + goal.w / 2 - 3, goal.y, 6, goal.h, POLE)
            flag_y = goal.y + self.session.flag_offset
            draw_rect(buffer, goal.x - cam + goal.w / 2 - 39, min(flag_y, goal.y + goal.h - 24),
                      36, 24, FLAG)

        self.draw_player(buffer, cam)

    def draw_terrain(self, buffer: Buffer, cam: float) -> None:
        for platform in self.level.platforms:
            draw_rect(buffer, platform.x - cam, platform.y, platform.w, platform.h,
                      GROUND if platform.h > 60 else LEDGE)
            draw_rect(buffer, platform.x - cam, platform.y, platform.w, 6, GROUND_TOP)

    def draw_enemy(self, buffer: Buffer, enemy: PatrolEnemy, cam: float) -> None:
        draw_rect(buffer, enemy.x - cam, enemy.y, enemy.w, enemy.h, WALKER)

    def draw_player(self, buffer: Buffer, cam: float) -> None:
        p = self.player
        # Blink while invulnerable
        if p.invuln_timer > 0 and int(p.invuln_timer * 10) % 2 == 0:
            return
        sprite = self.assets.get(f"player_{p.anim}")
        if sprite.ready:
            draw_image(buffer, sprite.pixels, int(p.x - cam), int(p.y))
        else:
            draw_rect(buffer, p.x - cam, p.y, p.w, p.h, PLAYER)
        if p.shield_timer > 0:
            draw_rect(buffer, p.x - cam - 4, p.y - 4, p.w + 8, p.h + 8, SHIELD_RING,
                      filled=False, thickness=2)

    def describe_entities(self) -> Dict[str, Any]:
        level = self.level
        player = entity_state(self.player)
        player["dashing"] = self.player.dashing
        return {
            "player": player,
            "world_width": level.world_width,
            "ridge_amplitude_ratio": self.cfg.ridge_amplitude_ratio,
            "platforms": [entity_state(p) for p in level.platforms],
            "hazards": [entity_state(h) for h in level.hazards],
            "enemies": [entity_state(e) for e in level.enemies],
            "collectibles": [entity_state(c) for c in level.collectibles],
            "goal": entity_state(level.goal) if level.goal is not None else None,
            "coins_left": level.remaining("coin"),
            "enemies_alive": sum(1 for e in level.enemies if not e.dead),
        }
