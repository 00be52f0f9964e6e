"""Hand-placed layouts for the two platformers.

Builders return fresh objects every call so a restart gets uncollected
coins and living enemies without any reset bookkeeping.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from retrocade.config.settings import PlatformerSettings
from retrocade.entities import Collectible, Goal, Hazard, PatrolEnemy, Platform


@dataclass
class Level:
    name: str
    world_width: float
    spawn: Tuple[float, float]
    platforms: List[Platform] = field(default_factory=list)
    hazards: List[Hazard] = field(default_factory=list)
    enemies: List[PatrolEnemy] = field(default_factory=list)
    collectibles: List[Collectible] = field(default_factory=list)
    goal: Optional[Goal] = None

    def remaining(self, kind: str = "coin") -> int:
        return sum(1 for c in self.collectibles if c.kind == kind and not c.collected)


GROUND_Y = 460.0


def _coin_row(x: float, y: float, count: int, spacing: float = 48.0) -> List[Collectible]:
    return [Collectible(x + i * spacing, y) for i in range(count)]


def _walker(x: float, width: float, min_x: float, max_x: float,
            floor: float = GROUND_Y, speed: float = 80.0) -> PatrolEnemy:
    return PatrolEnemy(x=x, y=floor - 48, w=width, h=48, vx=speed,
                       min_x=min_x, max_x=max_x)


def build_coin_run(cfg: PlatformerSettings) -> Level:
    """Ground with pits, floating ledges, walkers, spikes and a goal pole."""
    ground_h = cfg.viewport_height - GROUND_Y
    level = Level(
        name="coin_run",
        world_width=cfg.world_width,
        spawn=(80.0, GROUND_Y - cfg.player_height),
    )

    level.platforms = [
        # Ground segments; the gaps are pits
        Platform(0, GROUND_Y, 900, ground_h),
        Platform(1040, GROUND_Y, 760, ground_h),
        Platform(1960, GROUND_Y, 700, ground_h),
        Platform(2800, GROUND_Y, cfg.world_width - 2800, ground_h),
        # Ledges
        Platform(520, 330, 200, 28),
        Platform(1200, 300, 220, 28),
        Platform(1500, 200, 180, 28),
        Platform(2250, 320, 240, 28),
        Platform(3000, 300, 200, 28),
        # Pillar to slide down
        Platform(1720, 250, 60, GROUND_Y - 250),
    ]

    level.hazards = [
        Hazard(1300, GROUND_Y - 20, 120, 20),
        Hazard(2420, GROUND_Y - 20, 100, 20),
        Hazard(3250, GROUND_Y - 20, 80, 20),
    ]

    level.enemies = [
        _walker(600, 48, 420, 860),
        _walker(1100, 48, 1060, 1260, speed=100),
        _walker(2100, 48, 1980, 2380),
        _walker(2900, 48, 2820, 3200, speed=120),
        _walker(1240, 48, 1210, 1370, floor=300, speed=60),
    ]

    level.collectibles = (
        _coin_row(300, 400, 4)
        + _coin_row(560, 290, 4)
        + _coin_row(1240, 260, 4)
        + _coin_row(1530, 160, 3)
        + _coin_row(2000, 400, 5)
        + _coin_row(2280, 280, 4)
        + _coin_row(3030, 260, 4)
        + [
            Collectible(1590, 120, kind="time"),
            Collectible(940, 300, kind="speed"),
            Collectible(2710, 260, kind="shield"),
        ]
    )

    level.goal = Goal(3450, GROUND_Y - 220, 40, 220)
    return level


def build_sky_isles(cfg: PlatformerSettings) -> Level:
    """Ridge islands over open sky, rock golems to ride and thorn crawlers."""
    level = Level(
        name="sky_isles",
        world_width=cfg.world_width,
        spawn=(80.0, 240.0),
    )

    level.platforms = [
        Platform(0, 430, 640, 110, ridge=True),
        Platform(780, 380, 420, 90, ridge=True),
        Platform(1320, 320, 380, 80, ridge=True),
        Platform(1840, 400, 520, 100, ridge=True),
        Platform(2500, 330, 360, 80, ridge=True),
        Platform(2980, 420, cfg.world_width - 2980, 110, ridge=True),
        # Rock spire between islands, flat sided for wall slides
        Platform(2400, 150, 50, 170),
    ]

    level.hazards = [
        Hazard(1480, 300, 70, 20, kind="thorns"),
    ]

    level.enemies = [
        # Drifting cloud bridging the first gap
        PatrolEnemy(x=620, y=330, w=110, h=26, vx=60, min_x=600, max_x=700,
                    kind="cloud", standable=True, hazardous=False, stompable=False),
        # Golems block the path but can be climbed
        PatrolEnemy(x=900, y=310, w=64, h=64, vx=40, min_x=860, max_x=1080,
                    kind="golem", standable=True, hazardous=False, stompable=False),
        PatrolEnemy(x=2000, y=330, w=64, h=64, vx=50, min_x=1920, max_x=2240,
                    kind="golem", standable=True, hazardous=False, stompable=False),
        # Crawlers carry thorns on their sides
        PatrolEnemy(x=1400, y=280, w=48, h=36, vx=70, min_x=1360, max_x=1620,
                    kind="crawler", standable=True, hazardous=True, stompable=False),
        PatrolEnemy(x=3100, y=380, w=48, h=36, vx=90, min_x=3020, max_x=3380,
                    kind="crawler", standable=True, hazardous=True, stompable=False),
    ]

    level.collectibles = (
        _coin_row(200, 360, 5)
        + _coin_row(660, 270, 2)
        + _coin_row(860, 320, 4)
        + _coin_row(1380, 250, 5)
        + _coin_row(1940, 240, 4)
        + _coin_row(2560, 260, 4)
        + _coin_row(3050, 340, 5)
        + [
            Collectible(2425, 110, kind="shield"),
            Collectible(1620, 200, kind="speed"),
            Collectible(2700, 200, kind="time"),
        ]
    )

    level.goal = Goal(3460, 200, 40, 230)
    return level
