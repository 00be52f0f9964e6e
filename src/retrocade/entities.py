"""Entity model shared by the three games.

Plain dataclasses; all behaviour lives in the physics resolver and the
games. Every box is axis-aligned with (x, y) at the top-left corner.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from numpy.typing import NDArray

from retrocade.physics.geometry import Rect


@dataclass
class Player:
    x: float
    y: float
    w: float
    h: float
    vx: float = 0.0
    vy: float = 0.0
    facing: int = 1
    grounded: bool = False
    wall_slide: bool = False
    wall_dir: int = 0       # side of the wall being slid on (-1 left, +1 right)
    wall_contact: int = 0   # side touched by a blocking surface this frame

    # Timed status effects, seconds remaining
    speed_timer: float = 0.0
    shield_timer: float = 0.0
    invuln_timer: float = 0.0
    jump_boost_cooldown: float = 0.0
    dash_cooldown: float = 0.0
    dash_timer: float = 0.0
    dash_dir: int = 0

    anim: str = "idle"  # idle, walk, run, jump
    speed: float = 0.0  # shooter: constant lateral speed

    # Position at the start of the current step
    prev_x: float = 0.0
    prev_y: float = 0.0

    def __post_init__(self) -> None:
        self.prev_x = self.x
        self.prev_y = self.y

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center_x(self) -> float:
        return self.x + self.w / 2

    @property
    def dashing(self) -> bool:
        return self.dash_timer > 0

    def tick_effects(self, dt: float) -> None:
        """Count every timed effect down, never below zero."""
        self.speed_timer = max(0.0, self.speed_timer - dt)
        self.shield_timer = max(0.0, self.shield_timer - dt)
        self.invuln_timer = max(0.0, self.invuln_timer - dt)
        self.jump_boost_cooldown = max(0.0, self.jump_boost_cooldown - dt)
        self.dash_cooldown = max(0.0, self.dash_cooldown - dt)
        self.dash_timer = max(0.0, self.dash_timer - dt)
        if self.dash_timer == 0.0:
            self.dash_dir = 0

    def clear_effects(self) -> None:
        self.speed_timer = 0.0
        self.shield_timer = 0.0
        self.invuln_timer = 0.0
        self.jump_boost_cooldown = 0.0
        self.dash_cooldown = 0.0
        self.dash_timer = 0.0
        self.dash_dir = 0

    def place(self, x: float, y: float) -> None:
        """Teleport with zero velocity (spawn, respawn)."""
        self.x = self.prev_x = x
        self.y = self.prev_y = y
        self.vx = 0.0
        self.vy = 0.0
        self.grounded = False
        self.wall_slide = False
        self.wall_dir = 0
        self.wall_contact = 0
        self.facing = 1
        self.anim = "idle"


@dataclass
class PatrolEnemy:
    """Platformer walker pacing between min_x and max_x (left edge bounds)."""
    x: float
    y: float
    w: float
    h: float
    vx: float
    min_x: float
    max_x: float
    kind: str = "walker"
    standable: bool = False  # top surface supports the player
    hazardous: bool = True   # non-top contact hurts
    stompable: bool = True   # a fast enough landing defeats it
    dead: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)


@dataclass
class Invader:
    """Shooter grid enemy; type 0-2 picks sprite and score tier."""
    x: float
    y: float
    w: float
    h: float
    type: int
    alive: bool = True

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)


@dataclass
class Projectile:
    x: float
    y: float
    vy: float
    w: float = 4.0
    h: float = 10.0
    from_player: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)


@dataclass
class Bunker:
    """Destructible shield; each cell holds an integer durability, 0 = gone."""
    x: float
    y: float
    cells: NDArray[np.int_]
    scale: int = 4

    @property
    def width(self) -> float:
        return self.cells.shape[1] * self.scale

    @property
    def height(self) -> float:
        return self.cells.shape[0] * self.scale

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def solid_at(self, row: int, col: int) -> bool:
        return bool(self.cells[row, col] > 0)

    @classmethod
    def from_pattern(cls, x: float, y: float, pattern: List[str],
                     durability: int = 2, scale: int = 4) -> "Bunker":
        cells = np.array(
            [[durability if ch == "1" else 0 for ch in row] for row in pattern],
            dtype=np.int_,
        )
        return cls(x=x, y=y, cells=cells, scale=scale)


@dataclass
class Platform:
    """Static solid box; ridge platforms have a sampled waveform top."""
    x: float
    y: float
    w: float
    h: float
    ridge: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)


@dataclass
class Collectible:
    x: float  # centre
    y: float  # centre
    radius: float = 14.0
    kind: str = "coin"  # coin, time, speed, shield
    collected: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(self.x - self.radius, self.y - self.radius,
                    self.radius * 2, self.radius * 2)


@dataclass
class Goal:
    x: float
    y: float
    w: float
    h: float
    pole_height: float = 220.0

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)


@dataclass
class Hazard:
    x: float
    y: float
    w: float
    h: float
    kind: str = "spikes"

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)


@dataclass
class Session:
    """Session-scoped world record owned by one game."""
    score: int = 0
    hi_score: int = 0
    lives: int = 3
    level: int = 1
    credits: int = 0
    coins: int = 0
    camera_x: float = 0.0
    timer: float = 0.0
    intro_seen: bool = False

    # Phase-specific animation accumulators
    victory_timer: float = 0.0
    flag_offset: float = 0.0
    banner_timer: float = 0.0

    # Last contact that cost a life, for the HUD
    last_damage: Optional[str] = None
