"""
Phase state machine for a game session.

Phases:
    INTRO: Title card, waiting for a start action
    PLAYING: Simulation running
    PAUSED: Simulation frozen, overlay shown (shooter only)
    WAVE_CLEARED: Wave banner between shooter waves
    WON: Goal reached (platformers), victory scene animating
    GAME_OVER: Lives or time exhausted
"""

from enum import Enum, auto
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Session phases."""
    INTRO = auto()
    PLAYING = auto()
    PAUSED = auto()
    WAVE_CLEARED = auto()
    WON = auto()
    GAME_OVER = auto()


TERMINAL_PHASES = frozenset({Phase.WON, Phase.GAME_OVER})

PhaseListener = Callable[[Phase, Phase], None]


class PhaseMachine:
    """
    Tracks the session phase and validates transitions.

    Restart is the only way out of a terminal phase and is always allowed.
    """

    VALID_TRANSITIONS: list[tuple[Phase, Phase]] = [
        # From INTRO
        (Phase.INTRO, Phase.PLAYING),

        # From PLAYING
        (Phase.PLAYING, Phase.PAUSED),
        (Phase.PLAYING, Phase.WAVE_CLEARED),
        (Phase.PLAYING, Phase.WON),
        (Phase.PLAYING, Phase.GAME_OVER),

        # From PAUSED
        (Phase.PAUSED, Phase.PLAYING),

        # From WAVE_CLEARED
        (Phase.WAVE_CLEARED, Phase.PLAYING),
    ]

    def __init__(self, initial: Phase = Phase.INTRO) -> None:
        self._phase = initial
        self._listeners: list[PhaseListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)

    @property
    def phase(self) -> Phase:
        """Get current phase."""
        return self._phase

    @property
    def is_running_simulation(self) -> bool:
        """True while entities should move."""
        return self._phase == Phase.PLAYING

    @property
    def is_terminal(self) -> bool:
        return self._phase in TERMINAL_PHASES

    @property
    def accepts_edges(self) -> bool:
        """Edge actions and dash/boost arming are dropped in intro and terminal phases."""
        return self._phase != Phase.INTRO and not self.is_terminal

    def can_transition(self, to_phase: Phase) -> bool:
        """Check if transition to given phase is valid."""
        return (self._phase, to_phase) in self._valid_transitions

    def transition(self, to_phase: Phase) -> bool:
        """
        Attempt to transition to a new phase.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_phase):
            logger.warning(
                f"Invalid transition: {self._phase.name} -> {to_phase.name}"
            )
            return False

        self._set(to_phase)
        return True

    def restart(self, to_phase: Phase) -> None:
        """Jump to a phase unconditionally (session restart)."""
        self._set(to_phase)

    def _set(self, to_phase: Phase) -> None:
        old_phase = self._phase
        self._phase = to_phase

        logger.info(f"Phase transition: {old_phase.name} -> {to_phase.name}")

        for listener in self._listeners:
            try:
                listener(old_phase, to_phase)
            except Exception as e:
                logger.error(f"Error in phase listener: {e}")

    def add_listener(self, callback: PhaseListener) -> None:
        """Add a phase change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: PhaseListener) -> None:
        """Remove a phase change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
