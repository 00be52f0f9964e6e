"""Logical input actions, held state and double-tap detection."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional


class Action(Enum):
    """Logical actions after device mapping.

    JUMP is the primary button: jump in the platformers, fire in the shooter.
    """
    LEFT = auto()
    RIGHT = auto()
    JUMP = auto()
    UP = auto()
    DOWN = auto()
    PAUSE = auto()
    RESTART = auto()
    START = auto()


# Actions whose rapid repeat means something (dash, jump boost)
DOUBLE_TAP_ACTIONS = frozenset({Action.LEFT, Action.RIGHT, Action.JUMP})


@dataclass(frozen=True)
class InputEvent:
    """A device event already mapped to a logical action."""
    action: Action
    pressed: bool
    timestamp_ms: float


@dataclass(frozen=True)
class Press:
    """Outcome of a key-down.

    edge: the action went from released to held
    double_tap: same action pressed again within the window after a release
    """
    edge: bool
    double_tap: bool = False


class InputMapper:
    """Held-state record per action plus press timing.

    The mapper never decides whether an edge is allowed to act; games gate
    edges on phase, grounding, bullets in flight and cooldowns.
    """

    def __init__(self, double_tap_window_ms: float = 260.0) -> None:
        self.double_tap_window_ms = double_tap_window_ms
        self._held: Dict[Action, bool] = {action: False for action in Action}
        self._last_press_ms: Dict[Action, Optional[float]] = {
            action: None for action in Action
        }

    def held(self, action: Action) -> bool:
        return self._held[action]

    def press(self, action: Action, timestamp_ms: float) -> Press:
        """Record a key-down. Auto-repeat while held is not an edge."""
        if self._held[action]:
            return Press(edge=False)

        self._held[action] = True
        double_tap = False
        if action in DOUBLE_TAP_ACTIONS:
            last = self._last_press_ms[action]
            if last is not None and 0 <= timestamp_ms - last <= self.double_tap_window_ms:
                double_tap = True
            self._last_press_ms[action] = timestamp_ms

        return Press(edge=True, double_tap=double_tap)

    def release(self, action: Action, timestamp_ms: float) -> None:
        """Record a key-up; clears held state only."""
        self._held[action] = False

    def horizontal_axis(self) -> int:
        """-1, 0 or +1 from held LEFT/RIGHT."""
        return int(self._held[Action.RIGHT]) - int(self._held[Action.LEFT])

    def clear(self) -> None:
        """Drop all held state and press history."""
        for action in Action:
            self._held[action] = False
            self._last_press_ms[action] = None
