"""Base class for the RETROCADE games."""

from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Any, Dict, Optional
import logging

import numpy as np

from retrocade.config.settings import Settings, get_settings
from retrocade.core.events import EventBus, Event, EventType
from retrocade.core.input import Action, InputEvent, InputMapper, Press
from retrocade.core.state import Phase, PhaseMachine
from retrocade.entities import Session
from retrocade.graphics.assets import AssetLibrary
from retrocade.graphics.primitives import Buffer, dim, draw_centered_text, draw_text

logger = logging.getLogger(__name__)

INK = (255, 247, 194)
HUD_INK = (230, 230, 230)


def entity_state(entity: Any) -> Dict[str, Any]:
    """Plain-data copy of an entity dataclass; arrays become nested lists."""
    state = asdict(entity)
    for key, value in state.items():
        if isinstance(value, np.ndarray):
            state[key] = value.tolist()
    return state


class BaseGame(ABC):
    """Abstract base class for all games.

    A game exclusively owns its session record, phase machine, event bus
    and input state. The host feeds it input events and clamped frame
    steps; render only reads.

    Lifecycle:
        1. handle_input(event) - held state and edge actions
        2. update(dt) - simulation step, gated by phase
        3. render(buffer) - read-only drawing
        4. restart() - fresh session, intro skipped once seen
    """

    # Game metadata (override in subclasses)
    name: str = "base"
    display_name: str = "BASE"
    description: str = "Base game class"
    allow_pause: bool = False

    def __init__(self, settings: Optional[Settings] = None,
                 assets: Optional[AssetLibrary] = None):
        self.settings = settings or get_settings()
        self.phases = PhaseMachine(Phase.INTRO)
        self.event_bus = EventBus()
        self.input = InputMapper(self.settings.input.double_tap_window_ms)
        self.session = Session()
        self.assets = assets or AssetLibrary()
        self._time_in_phase = 0.0

        self.phases.add_listener(self._on_phase_changed)

        logger.debug(f"Game created: {self.name}")

    # Viewport size in pixels (override in subclasses)
    @property
    @abstractmethod
    def width(self) -> int:
        ...

    @property
    @abstractmethod
    def height(self) -> int:
        ...

    @property
    def phase(self) -> Phase:
        return self.phases.phase

    @property
    def time_in_phase(self) -> float:
        return self._time_in_phase

    # Input
    def handle_input(self, event: InputEvent) -> bool:
        """Process a mapped input event.

        Returns:
            True if the event triggered something
        """
        if not event.pressed:
            self.input.release(event.action, event.timestamp_ms)
            return False

        press = self.input.press(event.action, event.timestamp_ms)
        if not press.edge:
            return False

        if event.action == Action.START:
            return self.start()
        if event.action == Action.RESTART:
            self.restart()
            return True
        if event.action == Action.PAUSE:
            return self.toggle_pause()

        if not self.phases.accepts_edges:
            return False
        return self.on_action(event.action, press, event.timestamp_ms)

    # Session flow
    def start(self) -> bool:
        """Leave the intro."""
        if self.phase != Phase.INTRO:
            return False
        self.session.intro_seen = True
        logger.info(f"{self.name}: session started")
        return self.phases.transition(Phase.PLAYING)

    def restart(self) -> None:
        """Reset the whole session; the intro is not replayed once seen."""
        self.on_restart()
        target = Phase.PLAYING if self.session.intro_seen else Phase.INTRO
        self.phases.restart(target)
        logger.info(f"{self.name}: restarted into {target.name}")
        self.emit(EventType.RESTARTED)

    def toggle_pause(self) -> bool:
        if not self.allow_pause:
            return False
        if self.phase == Phase.PLAYING:
            return self.phases.transition(Phase.PAUSED)
        if self.phase == Phase.PAUSED:
            return self.phases.transition(Phase.PLAYING)
        return False

    def game_over(self, cause: str) -> None:
        if self.phases.transition(Phase.GAME_OVER):
            logger.info(f"{self.name}: game over ({cause})")
            self.emit(EventType.GAME_OVER, cause=cause, score=self.session.score)

    def add_score(self, points: int) -> None:
        self.session.score += points
        self.session.hi_score = max(self.session.hi_score, self.session.score)
        self.emit(EventType.SCORE_CHANGED, score=self.session.score,
                  hi_score=self.session.hi_score)

    # Frame
    def update(self, dt: float) -> None:
        """Advance one clamped step."""
        self._time_in_phase += dt
        self.on_update(dt)

    def render(self, buffer: Buffer) -> None:
        """Draw the playfield, then HUD and phase overlays."""
        self.render_main(buffer)
        draw_text(buffer, self.hud_text(), 6, 6, HUD_INK, scale=2)

        h = buffer.shape[0]
        title, subtitle = self.overlay_text()
        if title:
            if self.phase != Phase.INTRO:
                dim(buffer, 0.5)
            draw_centered_text(buffer, title, h // 2 - 30, INK, scale=5)
            if subtitle:
                draw_centered_text(buffer, subtitle, h // 2 + 10, INK, scale=2)

    def overlay_text(self) -> tuple[str, str]:
        """Title and subtitle for the current phase; empty while playing."""
        if self.phase == Phase.INTRO:
            return self.display_name, "PRESS ENTER"
        if self.phase == Phase.PAUSED:
            return "PAUSED", "P TO RESUME"
        if self.phase == Phase.GAME_OVER:
            return "GAME OVER", "R TO RESTART"
        return "", ""

    def emit(self, event_type: EventType, **data: Any) -> None:
        """Emit an event through this game's bus."""
        self.event_bus.emit(Event(type=event_type, data=data, source=self.name))

    def snapshot(self) -> Dict[str, Any]:
        """Read-only view of the world for presentation."""
        s = self.session
        state = {
            "game": self.name,
            "phase": self.phase.name,
            "width": self.width,
            "height": self.height,
            "intro": self.phase == Phase.INTRO,
            "paused": self.phase == Phase.PAUSED,
            "game_over": self.phase == Phase.GAME_OVER,
            "win": self.phase == Phase.WON,
            "score": s.score,
            "hi_score": s.hi_score,
            "lives": s.lives,
            "level": s.level,
            "credits": s.credits,
            "coins": s.coins,
            "timer": s.timer,
            "camera_x": s.camera_x,
            "victory_timer": s.victory_timer,
            "flag_offset": s.flag_offset,
        }
        state.update(self.describe_entities())
        return state

    def _on_phase_changed(self, old_phase: Phase, new_phase: Phase) -> None:
        self._time_in_phase = 0.0
        self.emit(EventType.PHASE_CHANGED, old=old_phase.name, new=new_phase.name)

    # Abstract methods (must be implemented by subclasses)
    @abstractmethod
    def on_restart(self) -> None:
        """Rebuild the session record and entities."""
        pass

    @abstractmethod
    def on_update(self, delta: float) -> None:
        """Per-frame simulation."""
        pass

    @abstractmethod
    def on_action(self, action: Action, press: Press, timestamp_ms: float) -> bool:
        """Handle an edge action allowed by the phase. Return True if handled."""
        pass

    @abstractmethod
    def render_main(self, buffer: Buffer) -> None:
        pass

    @abstractmethod
    def hud_text(self) -> str:
        pass

    @abstractmethod
    def describe_entities(self) -> Dict[str, Any]:
        pass
