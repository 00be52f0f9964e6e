"""Frame clock driving update/render from host frame callbacks."""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class FrameClock:
    """
    Converts absolute host timestamps into clamped simulation steps.

    The host calls ``tick(now_ms)`` once per frame (pygame clock, browser
    frame callback, test harness). The step is capped so a long stall
    (window drag, debugger pause) never produces a huge integration step.
    """

    def __init__(
        self,
        update: Callable[[float], None],
        render: Callable[[], None],
        is_running: Callable[[], bool] = lambda: True,
        frame_cap: float = 1.0 / 30.0,
    ) -> None:
        self._update = update
        self._render = render
        self._is_running = is_running
        self.frame_cap = frame_cap
        self._last_ms: Optional[float] = None
        self.frame_count = 0

    def tick(self, now_ms: float) -> float:
        """Advance one frame.

        Args:
            now_ms: Monotonic host timestamp in milliseconds

        Returns:
            The clamped delta in seconds that was (or would have been) simulated
        """
        if self._last_ms is None:
            dt = 0.0
        else:
            dt = max(0.0, min(self.frame_cap, (now_ms - self._last_ms) / 1000.0))
        self._last_ms = now_ms

        if self._is_running():
            self._update(dt)
            self._render()

        self.frame_count += 1
        return dt

    def reset(self) -> None:
        """Forget the last timestamp; the next tick simulates nothing."""
        self._last_ms = None
