"""Map game events to tones."""

import logging
from typing import Callable, Dict, List

from retrocade.audio.engine import AudioEngine
from retrocade.audio.synth import ToneSpec, WaveType
from retrocade.core.events import Event, EventBus, EventType

logger = logging.getLogger(__name__)


SHOOT = ToneSpec(WaveType.SQUARE, 820, 0.07, 0.06, sweep_to=340)
EXPLOSION = ToneSpec(WaveType.SAWTOOTH, 240, 0.12, 0.07, sweep_to=90)
BUNKER_THUD = ToneSpec(WaveType.SAWTOOTH, 160, 0.05, 0.04, sweep_to=80)
COIN = ToneSpec(WaveType.SQUARE, 988, 0.06, 0.05, sweep_to=1319)
JUMP = ToneSpec(WaveType.SQUARE, 330, 0.1, 0.05, sweep_to=660)
DASH = ToneSpec(WaveType.TRIANGLE, 520, 0.09, 0.06, sweep_to=180)
PICKUP = ToneSpec(WaveType.TRIANGLE, 660, 0.12, 0.07, sweep_to=1320)
SHIELD_POP = ToneSpec(WaveType.SINE, 880, 0.15, 0.07, sweep_to=220)

LIFE_LOST = [
    ToneSpec(WaveType.SQUARE, 440, 0.09, 0.07),
    ToneSpec(WaveType.SQUARE, 330, 0.09, 0.07),
    ToneSpec(WaveType.SQUARE, 220, 0.16, 0.07),
]
WAVE_CLEARED = [
    ToneSpec(WaveType.SQUARE, 523, 0.08, 0.06),
    ToneSpec(WaveType.SQUARE, 659, 0.08, 0.06),
    ToneSpec(WaveType.SQUARE, 784, 0.14, 0.06),
]
WIN = [
    ToneSpec(WaveType.TRIANGLE, 523, 0.1, 0.08),
    ToneSpec(WaveType.TRIANGLE, 659, 0.1, 0.08),
    ToneSpec(WaveType.TRIANGLE, 784, 0.1, 0.08),
    ToneSpec(WaveType.TRIANGLE, 1047, 0.3, 0.08),
]
GAME_OVER = ToneSpec(WaveType.SAWTOOTH, 220, 0.6, 0.07, sweep_to=55)

SEQUENCE_GAP = 0.11


class AudioCues:
    """Subscribes to a game's event bus and triggers matching tones."""

    def __init__(self, event_bus: EventBus, engine: AudioEngine):
        self.engine = engine
        self._single: Dict[EventType, ToneSpec] = {
            EventType.SHOT_FIRED: SHOOT,
            EventType.ENEMY_DESTROYED: EXPLOSION,
            EventType.BUNKER_HIT: BUNKER_THUD,
            EventType.COIN_COLLECTED: COIN,
            EventType.JUMPED: JUMP,
            EventType.DASHED: DASH,
            EventType.PICKUP_COLLECTED: PICKUP,
            EventType.SHIELD_ABSORBED: SHIELD_POP,
            EventType.GAME_OVER: GAME_OVER,
        }
        self._sequences: Dict[EventType, List[ToneSpec]] = {
            EventType.LIFE_LOST: LIFE_LOST,
            EventType.WAVE_CLEARED: WAVE_CLEARED,
            EventType.WIN: WIN,
        }
        self._unsubscribers: List[Callable[[], None]] = [
            event_bus.subscribe(event_type, self._on_single)
            for event_type in self._single
        ] + [
            event_bus.subscribe(event_type, self._on_sequence)
            for event_type in self._sequences
        ]

    def _on_single(self, event: Event) -> None:
        self.engine.play_tone(self._single[event.type])

    def _on_sequence(self, event: Event) -> None:
        self.engine.schedule(self._sequences[event.type], SEQUENCE_GAP)

    def detach(self) -> None:
        """Stop listening (game switched)."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.engine.clear()
        logger.debug("Audio cues detached")
