"""
Desktop host window using pygame.

Maps the keyboard to logical actions, drives the frame clock from
pygame's millisecond ticks and blits each game's numpy frame buffer.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import pygame

from retrocade.core.events import Event, EventBus, EventType
from retrocade.core.input import Action, InputEvent
from retrocade.core.loop import FrameClock
from retrocade.games.manager import GameManager
from retrocade.graphics.primitives import Buffer, new_buffer

logger = logging.getLogger(__name__)


KEY_ACTIONS: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_a: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_d: Action.RIGHT,
    pygame.K_UP: Action.UP,
    pygame.K_DOWN: Action.DOWN,
    pygame.K_SPACE: Action.JUMP,
    pygame.K_p: Action.PAUSE,
    pygame.K_r: Action.RESTART,
    pygame.K_RETURN: Action.START,
}

GAME_KEYS: Dict[int, int] = {
    pygame.K_1: 0,
    pygame.K_2: 1,
    pygame.K_3: 2,
}


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    title: str = "RETROCADE"
    scale: int = 1
    fullscreen: bool = False
    fps: int = 60
    status_height: int = 28

    # Colors
    bg_color: tuple[int, int, int] = (20, 20, 30)
    text_color: tuple[int, int, int] = (200, 200, 220)


class SimulatorWindow:
    """
    Desktop window hosting the game manager.

    Keyboard Mapping:
        LEFT/RIGHT (or A/D): Move
        UP/DOWN: Look
        SPACE: Jump / fire
        ENTER: Start
        P: Pause (shooter)
        R: Restart
        1-3: Switch game
        ESC: Exit
    """

    def __init__(
        self,
        manager: GameManager,
        config: WindowConfig | None = None,
        frame_cap: float = 1.0 / 30.0,
        event_bus: EventBus | None = None,
        debug: bool = False,
    ) -> None:
        self.manager = manager
        self.config = config or WindowConfig()
        self.event_bus = event_bus or EventBus()
        self.debug = debug

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._running = False
        self._buffer: Optional[Buffer] = None

        self.frame_clock = FrameClock(
            update=self.manager.update,
            render=self._render_game,
            frame_cap=frame_cap,
        )

        self._setup_event_handlers()
        logger.info("SimulatorWindow created")

    def _setup_event_handlers(self) -> None:
        """Route keyboard actions and frame ticks through the bus."""
        # Logged before dispatch so the phase shown is the one the action hit
        if self.debug:
            self.event_bus.subscribe(EventType.ACTION_PRESSED, self._log_action)
            self.event_bus.subscribe(EventType.ACTION_RELEASED, self._log_action)

        self.event_bus.subscribe(EventType.TICK, self._on_tick)
        self.event_bus.subscribe(EventType.ACTION_PRESSED, self._on_action)
        self.event_bus.subscribe(EventType.ACTION_RELEASED, self._on_action)

    # Geometry follows the active game
    def _game_size(self) -> tuple[int, int]:
        game = self.manager.current
        if game is None:
            return 448, 512
        return game.width, game.height

    def _window_size(self) -> tuple[int, int]:
        w, h = self._game_size()
        s = self.config.scale
        return w * s, h * s + self.config.status_height

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        pygame.font.init()
        self._font = pygame.font.SysFont(None, 20)
        self._clock = pygame.time.Clock()
        self._resize()
        logger.info(f"Pygame initialized: {self._window_size()[0]}x{self._window_size()[1]}")

    def _resize(self) -> None:
        flags = pygame.DOUBLEBUF
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN
        self._screen = pygame.display.set_mode(self._window_size(), flags)
        w, h = self._game_size()
        self._buffer = new_buffer(w, h)

    # Input
    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key, pressed=True)
            elif event.type == pygame.KEYUP:
                self._handle_key(event.key, pressed=False)

    def _handle_key(self, key: int, pressed: bool) -> None:
        if key == pygame.K_ESCAPE:
            if pressed:
                self._running = False
            return

        if key in GAME_KEYS:
            if pressed:
                self._switch_game(GAME_KEYS[key])
            return

        action = KEY_ACTIONS.get(key)
        if action is None:
            return

        event_type = EventType.ACTION_PRESSED if pressed else EventType.ACTION_RELEASED
        self.event_bus.emit(Event(
            event_type,
            data={"action": action.name, "timestamp_ms": float(pygame.time.get_ticks())},
            source="keyboard",
        ))

    def _on_action(self, event: Event) -> None:
        pressed = event.type == EventType.ACTION_PRESSED
        self.manager.handle_input(InputEvent(
            Action[event.data["action"]], pressed, event.data["timestamp_ms"]))

    def _log_action(self, event: Event) -> None:
        game = self.manager.current
        phase = game.phase.name if game else "-"
        logger.debug(f"{event.type.name} {event.data['action']} in {phase}")

    def _on_tick(self, event: Event) -> None:
        self.frame_clock.tick(event.data["now_ms"])

    def _tick(self, now_ms: float) -> None:
        self.event_bus.emit(Event(EventType.TICK, data={"now_ms": now_ms}))

    def _switch_game(self, index: int) -> None:
        if self.manager.select_index(index) is None:
            return
        self.frame_clock.reset()
        self._resize()

    # Rendering
    def _render_game(self) -> None:
        if self._buffer is None:
            return
        self.manager.render(self._buffer)

    def _present(self) -> None:
        if self._screen is None or self._buffer is None:
            return

        self._screen.fill(self.config.bg_color)

        # surfarray is (W, H, 3); the buffer is (H, W, 3)
        surface = pygame.surfarray.make_surface(np.transpose(self._buffer, (1, 0, 2)))
        if self.config.scale != 1:
            w, h = self._game_size()
            surface = pygame.transform.scale(surface, (w * self.config.scale, h * self.config.scale))
        self._screen.blit(surface, (0, 0))

        self._render_status_bar()
        pygame.display.flip()

    def _render_status_bar(self) -> None:
        if self._font is None or self._screen is None:
            return
        game = self.manager.current
        label = game.display_name if game else "-"
        phase = game.phase.name if game else ""
        fps = self._clock.get_fps() if self._clock else 0.0
        text = f"{label}  {phase}  |  1-3 switch  ENTER start  R restart  |  {fps:4.0f} fps"
        surf = self._font.render(text, True, self.config.text_color)
        y = self._screen.get_height() - self.config.status_height + 6
        self._screen.blit(surf, (8, y))

    async def run(self) -> None:
        """Main simulator loop."""
        self._init_pygame()
        self._running = True

        logger.info("Simulator started")

        while self._running:
            self._handle_events()

            self._tick(float(pygame.time.get_ticks()))

            self._present()

            if self._clock:
                self._clock.tick(self.config.fps)

            # Yield to other tasks
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        self.manager.shutdown()
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Stop the simulator."""
        self._running = False
