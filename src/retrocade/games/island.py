"""
Sky Isles - floating-island platformer.

Same rules as Coin Run on curved-top islands. Most enemies here are solid:
golems and clouds can be ridden, crawlers hurt on any contact except from
above. Wall slides, double-tap dashes and jump boosts get you across.
"""

from retrocade.entities import PatrolEnemy
from retrocade.games.levels import Level, build_sky_isles
from retrocade.games.platformer import PlatformerGame
from retrocade.graphics.primitives import Buffer, draw_columns, draw_rect
from retrocade.physics.collision import ridge_height


SKY_NIGHT = (40, 24, 88)
ISLAND_ROCK = (96, 72, 64)
ISLAND_GRASS = (92, 196, 112)
SPIRE = (120, 110, 140)
GRASS_DEPTH = 8

ENEMY_COLORS = {
    "cloud": (236, 236, 248),
    "golem": (130, 120, 100),
    "crawler": (200, 40, 90),
}


class IslandGame(PlatformerGame):
    """Platformer variant on ridge-topped islands."""

    name = "sky_isles"
    display_name = "SKY ISLES"
    description = "Hop, slide and dash across the floating islands"

    sky_color = SKY_NIGHT

    def build_level(self) -> Level:
        return build_sky_isles(self.cfg)

    def draw_terrain(self, buffer: Buffer, cam: float) -> None:
        ratio = self.cfg.ridge_amplitude_ratio
        for platform in self.level.platforms:
            if not platform.ridge:
                draw_rect(buffer, platform.x - cam, platform.y, platform.w, platform.h, SPIRE)
                continue
            bottom = platform.y + platform.h
            draw_columns(buffer, platform.x, platform.w, bottom,
                         lambda x, pl=platform: ridge_height(pl, x, ratio),
                         ISLAND_GRASS, offset_x=cam)
            draw_columns(buffer, platform.x, platform.w, bottom,
                         lambda x, pl=platform: ridge_height(pl, x, ratio) + GRASS_DEPTH,
                         ISLAND_ROCK, offset_x=cam)

    def draw_enemy(self, buffer: Buffer, enemy: PatrolEnemy, cam: float) -> None:
        draw_rect(buffer, enemy.x - cam, enemy.y, enemy.w, enemy.h,
                  ENEMY_COLORS.get(enemy.kind, ISLAND_ROCK))
