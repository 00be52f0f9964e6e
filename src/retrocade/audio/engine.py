"""
RETROCADE audio engine.

Plays synthesized tones through pygame.mixer. Audio is a side
collaborator: if the mixer cannot start, every request becomes a silent
no-op and the games never notice.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import pygame

from retrocade.audio.synth import ToneSpec, render_tone

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTone:
    due: float  # seconds on the engine clock
    spec: ToneSpec


class AudioEngine:
    """
    Fire-and-forget tone player.

    Multi-beep jingles are queued with ``schedule`` and released by
    ``update(dt)`` from the same frame clock that drives the games, so
    there are no timers or threads.
    """

    def __init__(self, sample_rate: int = 22050, volume: float = 0.8,
                 enabled: bool = True):
        self.sample_rate = sample_rate
        self._volume = volume
        self._enabled = enabled
        self._initialized = False
        self._failed = False
        self._sounds: Dict[ToneSpec, pygame.mixer.Sound] = {}
        self._pending: List[ScheduledTone] = []
        self._clock = 0.0
        self._muted = False

    @property
    def available(self) -> bool:
        return self._initialized and not self._muted

    def init(self) -> bool:
        """Start the mixer; failure leaves the engine silent."""
        if not self._enabled:
            logger.info("Audio disabled by settings")
            return False
        if self._initialized:
            return True
        if self._failed:
            return False
        try:
            pygame.mixer.pre_init(self.sample_rate, -16, 1, 512)
            pygame.mixer.init()
            pygame.mixer.set_num_channels(16)
            self._initialized = True
            logger.info("Audio engine initialized")
            return True
        except pygame.error as e:
            self._failed = True
            logger.warning(f"Audio unavailable, running silent: {e}")
            return False

    def set_muted(self, muted: bool) -> None:
        self._muted = muted

    def play_tone(self, spec: ToneSpec) -> bool:
        """Start a tone now. Returns False when nothing was played."""
        if not self.available:
            return False
        try:
            sound = self._sounds.get(spec)
            if sound is None:
                sound = self._create_sound(render_tone(spec, self.sample_rate))
                self._sounds[spec] = sound
            sound.set_volume(self._volume)
            sound.play()
            return True
        except pygame.error as e:
            logger.debug(f"Tone rejected: {e}")
            return False

    def _create_sound(self, samples: np.ndarray) -> pygame.mixer.Sound:
        """Create a Sound matching the mixer's channel count."""
        init = pygame.mixer.get_init()
        channels = init[2] if init else 1
        if channels > 1:
            samples = np.repeat(samples[:, None], channels, axis=1)
        return pygame.mixer.Sound(buffer=np.ascontiguousarray(samples).tobytes())

    def schedule(self, specs: Sequence[ToneSpec], gap: float,
                 delay: float = 0.0) -> None:
        """Queue a sequence of tones `gap` seconds apart."""
        for i, spec in enumerate(specs):
            self._pending.append(ScheduledTone(self._clock + delay + i * gap, spec))

    def update(self, dt: float) -> None:
        """Advance the engine clock and play due tones."""
        self._clock += dt
        due = [tone for tone in self._pending if tone.due <= self._clock]
        if not due:
            return
        self._pending = [tone for tone in self._pending if tone.due > self._clock]
        for tone in due:
            self.play_tone(tone.spec)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def clear(self) -> None:
        """Drop queued tones."""
        self._pending.clear()

    def cleanup(self) -> None:
        """Shut down the mixer."""
        self._pending.clear()
        self._sounds.clear()
        if self._initialized:
            pygame.mixer.quit()
            self._initialized = False


# Global instance
_audio_engine: Optional[AudioEngine] = None


def get_audio_engine() -> AudioEngine:
    """Get or create the global audio engine."""
    global _audio_engine
    if _audio_engine is None:
        from retrocade.config.settings import get_settings

        audio = get_settings().audio
        _audio_engine = AudioEngine(
            sample_rate=audio.sample_rate,
            volume=audio.volume,
            enabled=audio.enabled,
        )
    return _audio_engine
