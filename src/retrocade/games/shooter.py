"""
Shooter - fixed-screen invader defence.

A 5x11 grid marches sideways in discrete steps, dropping a row at the
playfield edges and speeding up as it thins out. The player slides along
the bottom with a single bullet in flight; four bunkers erode cell by cell.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from retrocade.config.settings import Settings
from retrocade.core.events import EventType
from retrocade.core.input import Action, Press
from retrocade.core.state import Phase
from retrocade.entities import Bunker, Invader, Player, Projectile
from retrocade.games.base import BaseGame, entity_state
from retrocade.graphics.assets import AssetLibrary
from retrocade.graphics.primitives import Buffer, draw_line, draw_rect, draw_sprite, fill
from retrocade.physics.collision import erode_bunker
from retrocade.physics.geometry import clamp, rects_overlap

logger = logging.getLogger(__name__)


# Colors
BG = (20, 0, 0)
ENEMY_INK = (255, 243, 191)
PLAYER_INK = (255, 247, 207)
BUNKER_FULL = (255, 243, 190)
BUNKER_WORN = (228, 208, 155)
BULLET_INK = (255, 247, 225)
ENEMY_BULLET_INK = (255, 213, 143)
LINE_INK = (143, 106, 106)

ENEMY_LAYOUTS = [
    {
        "frames": (
            ["00111100", "11111111", "11011011", "11111111", "00100100", "01000010"],
            ["00111100", "11111111", "11011011", "11111111", "01011010", "10000001"],
        ),
        "score": 30,
    },
    {
        "frames": (
            ["00111100", "01111110", "11111111", "11011011", "11111111", "00100100"],
            ["00111100", "01111110", "11111111", "11011011", "11111111", "01000010"],
        ),
        "score": 20,
    },
    {
        "frames": (
            ["00011000", "00111100", "01111110", "11111111", "01111110", "00100100"],
            ["00011000", "00111100", "01111110", "11111111", "00111100", "01000010"],
        ),
        "score": 10,
    },
]

PLAYER_SPRITE = [
    "00011000011000",
    "00111100111100",
    "01111111111110",
    "11111111111111",
    "11111011011111",
    "11111111111111",
    "01111000011110",
    "00110000001100",
]

BUNKER_PATTERN = [
    "00111111111100",
    "01111111111110",
    "11111111111111",
    "11111111111111",
    "11110000111111",
    "11100000011111",
    "11000000001111",
    "11000000001111",
]


class ShooterGame(BaseGame):
    """Fixed shooter with waves, bunkers, credits and a pause toggle."""

    name = "shooter"
    display_name = "INVADERS"
    description = "Hold the line against the descending grid"
    allow_pause = True

    # Grid
    ROWS = 5
    COLS = 11
    START_X = 40
    START_Y = 58
    GAP_X = 32
    GAP_Y = 24
    ENEMY_W = 24
    ENEMY_H = 18
    EDGE_MARGIN = 18
    STEP_DOWN = 18
    COLUMN_BUCKET = 8

    # Player
    PLAYER_W = 32
    PLAYER_H = 16
    SIDE_MARGIN = 10

    BUNKER_COUNT = 4
    BULLET_DESPAWN = 20

    def __init__(self, settings: Optional[Settings] = None,
                 assets: Optional[AssetLibrary] = None,
                 rng: Optional[random.Random] = None):
        super().__init__(settings, assets)
        self.cfg = self.settings.shooter
        self.rng = rng or random.Random(self.settings.seed)

        self.player: Player = self._create_player()
        self.invaders: List[Invader] = []
        self.bunkers: List[Bunker] = []
        self.player_bullet: Optional[Projectile] = None
        self.enemy_bullets: List[Projectile] = []

        self.enemy_dir = 1
        self.enemy_speed = 28.0
        self.move_timer = 0.0
        self.move_delay = 0.6
        self.anim_frame = 0
        self.shoot_timer = 0.0

        self.session.credits = self.cfg.credits
        self._reset_game()

    @property
    def width(self) -> int:
        return self.cfg.width

    @property
    def height(self) -> int:
        return self.cfg.height

    # Construction
    def _create_player(self) -> Player:
        return Player(
            x=self.width / 2 - self.PLAYER_W / 2,
            y=self.height - 64,
            w=self.PLAYER_W,
            h=self.PLAYER_H,
            speed=self.cfg.player_speed,
        )

    def _create_bunkers(self) -> List[Bunker]:
        spacing = self.width / (self.BUNKER_COUNT + 1)
        return [
            Bunker.from_pattern(int(spacing * (i + 1) - 28), self.height - 130, BUNKER_PATTERN)
            for i in range(self.BUNKER_COUNT)
        ]

    def _create_invaders(self) -> List[Invader]:
        invaders = []
        for row in range(self.ROWS):
            if row == 0:
                kind = 0
            elif row < 3:
                kind = 1
            else:
                kind = 2
            for col in range(self.COLS):
                invaders.append(Invader(
                    x=self.START_X + col * self.GAP_X,
                    y=self.START_Y + row * self.GAP_Y,
                    w=self.ENEMY_W,
                    h=self.ENEMY_H,
                    type=kind,
                ))
        return invaders

    def _reset_wave(self) -> None:
        level = self.session.level
        self.invaders = self._create_invaders()
        self.enemy_bullets = []
        self.player_bullet = None
        self.enemy_dir = 1
        self.move_delay = max(0.11, 0.6 - (level - 1) * 0.07)
        self.enemy_speed = 28 + (level - 1) * 4
        self.move_timer = 0.0
        self.anim_frame = 0
        self.shoot_timer = 0.0

    def _reset_game(self) -> None:
        s = self.session
        s.score = 0
        s.lives = self.cfg.lives
        s.level = 1
        s.banner_timer = 0.0
        s.last_damage = None
        self.player = self._create_player()
        self.bunkers = self._create_bunkers()
        self._reset_wave()

    def on_restart(self) -> None:
        # High score and credits survive a restart
        self._reset_game()
        self.emit(EventType.SCORE_CHANGED, score=0, hi_score=self.session.hi_score)

    # Input
    def on_action(self, action: Action, press: Press, timestamp_ms: float) -> bool:
        if action == Action.JUMP:
            return self.fire()
        return False

    def fire(self) -> bool:
        """Launch the player bullet; only one may be in flight."""
        if self.player_bullet is not None or self.phase != Phase.PLAYING:
            return False
        p = self.player
        self.player_bullet = Projectile(
            x=p.x + p.w / 2 - 2,
            y=p.y - 10,
            vy=-self.cfg.player_bullet_speed,
            from_player=True,
        )
        self.emit(EventType.SHOT_FIRED)
        return True

    # Simulation
    def on_update(self, delta: float) -> None:
        if self.phase == Phase.WAVE_CLEARED:
            self.session.banner_timer = max(0.0, self.session.banner_timer - delta)
            if self.session.banner_timer == 0.0:
                self.phases.transition(Phase.PLAYING)
            return
        if self.phase != Phase.PLAYING:
            return

        p = self.player
        p.x += self.input.horizontal_axis() * p.speed * delta
        p.x = clamp(p.x, self.SIDE_MARGIN, self.width - p.w - self.SIDE_MARGIN)

        self.shoot_timer += delta
        if self.shoot_timer >= max(0.2, 0.9 - self.session.level * 0.07):
            self._fire_enemy_bullet()
            self.shoot_timer = 0.0

        self._step_invaders(delta)
        if self.phase != Phase.PLAYING:
            return
        self._move_bullets(delta)
        self._handle_collisions()

    def alive_invaders(self) -> List[Invader]:
        return [e for e in self.invaders if e.alive]

    def shooters(self) -> List[Invader]:
        """Lowest living invader of each column bucket."""
        columns: Dict[int, Invader] = {}
        for enemy in self.alive_invaders():
            col = round(enemy.x / self.COLUMN_BUCKET)
            current = columns.get(col)
            if current is None or current.y < enemy.y:
                columns[col] = enemy
        return list(columns.values())

    def _fire_enemy_bullet(self) -> None:
        shooters = self.shooters()
        if not shooters:
            return
        shooter = shooters[self.rng.randrange(len(shooters))]
        self.enemy_bullets.append(Projectile(
            x=shooter.x + shooter.w / 2 - 2,
            y=shooter.y + shooter.h,
            vy=210 + self.session.level * 12,
        ))

    def _step_invaders(self, delta: float) -> None:
        self.move_timer += delta
        if self.move_timer < self.move_delay:
            return
        self.move_timer = 0.0
        self.anim_frame = (self.anim_frame + 1) % 2

        alive = self.alive_invaders()
        if not alive:
            return

        min_x = min(e.x for e in alive)
        max_x = max(e.x + e.w for e in alive)
        move = self.enemy_speed * self.move_delay

        touch_edge = (
            (self.enemy_dir > 0 and max_x + move > self.width - self.EDGE_MARGIN)
            or (self.enemy_dir < 0 and min_x - move < self.EDGE_MARGIN)
        )
        if touch_edge:
            self.enemy_dir *= -1
            for enemy in alive:
                enemy.y += self.STEP_DOWN
            if any(e.y + e.h >= self.player.y for e in alive):
                self.game_over("invaded")
        else:
            for enemy in alive:
                enemy.x += move * self.enemy_dir

        level = self.session.level
        speed_boost = max(0.2, len(alive) / (self.ROWS * self.COLS))
        self.move_delay = max(0.08, (0.55 - (level - 1) * 0.05) * speed_boost + 0.05)

    def _move_bullets(self, delta: float) -> None:
        bullet = self.player_bullet
        if bullet is not None:
            bullet.y += bullet.vy * delta
            if bullet.y < -self.BULLET_DESPAWN:
                self.player_bullet = None

        for bullet in self.enemy_bullets:
            bullet.y += bullet.vy * delta
        self.enemy_bullets = [b for b in self.enemy_bullets
                              if b.y < self.height + self.BULLET_DESPAWN]

    def _handle_collisions(self) -> None:
        bullet = self.player_bullet
        if bullet is not None:
            for enemy in self.invaders:
                if enemy.alive and rects_overlap(bullet.rect, enemy.rect):
                    enemy.alive = False
                    self.player_bullet = None
                    self.emit(EventType.ENEMY_DESTROYED, type=enemy.type)
                    self.add_score(ENEMY_LAYOUTS[enemy.type]["score"])
                    break

        bullet = self.player_bullet
        if bullet is not None and erode_bunker(self.bunkers, bullet, 2) is not None:
            self.player_bullet = None
            self.emit(EventType.BUNKER_HIT, from_player=True)

        survivors = []
        for bullet in self.enemy_bullets:
            if erode_bunker(self.bunkers, bullet, 1) is not None:
                self.emit(EventType.BUNKER_HIT, from_player=False)
                continue
            if self.phase == Phase.PLAYING and rects_overlap(bullet.rect, self.player.rect):
                self._lose_life()
                continue
            survivors.append(bullet)
        self.enemy_bullets = survivors

        if self.phase == Phase.PLAYING and not any(e.alive for e in self.invaders):
            self._advance_wave()

    def _lose_life(self) -> None:
        s = self.session
        s.lives = max(0, s.lives - 1)
        s.last_damage = "bullet"
        self.emit(EventType.LIFE_LOST, lives=s.lives, cause="bullet")
        if s.lives == 0:
            self.game_over("shot down")
        else:
            self.player.x = self.width / 2 - self.player.w / 2

    def _advance_wave(self) -> None:
        s = self.session
        s.level += 1
        s.credits = max(0, s.credits - 1)
        self.bunkers = self._create_bunkers()
        self._reset_wave()
        logger.info(f"Wave cleared, now level {s.level}")

        s.banner_timer = self.cfg.wave_banner_seconds
        self.phases.transition(Phase.WAVE_CLEARED)
        self.emit(EventType.WAVE_CLEARED, level=s.level, credits=s.credits)
        if s.banner_timer == 0.0:
            self.phases.transition(Phase.PLAYING)

    # Presentation
    def hud_text(self) -> str:
        s = self.session
        return (f"SCORE {s.score:04d}  HI {s.hi_score:04d}  "
                f"LIVES {s.lives}  LV {s.level}  CREDIT {s.credits:02d}")

    def overlay_text(self) -> tuple[str, str]:
        if self.phase == Phase.WAVE_CLEARED:
            return f"WAVE {self.session.level}", ""
        return super().overlay_text()

    def render_main(self, buffer: Buffer) -> None:
        fill(buffer, BG)

        for enemy in self.invaders:
            if enemy.alive:
                sprite = ENEMY_LAYOUTS[enemy.type]["frames"][self.anim_frame]
                draw_sprite(buffer, enemy.x, enemy.y, sprite, 3, ENEMY_INK)

        for bunker in self.bunkers:
            rows, cols = bunker.cells.shape
            for r in range(rows):
                for c in range(cols):
                    hp = bunker.cells[r, c]
                    if hp <= 0:
                        continue
                    color = BUNKER_FULL if hp >= 2 else BUNKER_WORN
                    draw_rect(buffer, bunker.x + c * bunker.scale, bunker.y + r * bunker.scale,
                              bunker.scale, bunker.scale, color)

        draw_sprite(buffer, self.player.x, self.player.y, PLAYER_SPRITE, 2, PLAYER_INK)

        if self.player_bullet is not None:
            b = self.player_bullet
            draw_rect(buffer, b.x, b.y, b.w, b.h, BULLET_INK)
        for b in self.enemy_bullets:
            draw_rect(buffer, b.x, b.y, b.w, b.h, ENEMY_BULLET_INK)

        line_y = self.height - 38
        draw_line(buffer, 10, line_y, self.width - 10, line_y, LINE_INK)
        draw_line(buffer, 10, line_y + 1, self.width - 10, line_y + 1, LINE_INK)

    def describe_entities(self) -> Dict[str, Any]:
        bullet = self.player_bullet
        return {
            "player": entity_state(self.player),
            "invaders": [entity_state(i) for i in self.invaders],
            "invaders_alive": len(self.alive_invaders()),
            "player_bullet": entity_state(bullet) if bullet is not None else None,
            "enemy_bullets": [entity_state(b) for b in self.enemy_bullets],
            "bunkers": [entity_state(b) for b in self.bunkers],
            "anim_frame": self.anim_frame,
            "enemy_dir": self.enemy_dir,
            "move_delay": self.move_delay,
        }
