"""
Tone synthesis for arcade cues.

One oscillator per tone with an optional exponential pitch sweep and a
short exponential attack/decay envelope - the classic blip, pew and boom.
"""

import math
from enum import Enum
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

# Exponential ramps cannot start or end at zero
SILENCE = 0.0001
ATTACK = 0.01      # seconds
MIN_SWEEP_HZ = 40.0


class WaveType(Enum):
    """Oscillator waveform types."""
    SINE = "sine"
    SQUARE = "square"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"


@dataclass(frozen=True)
class ToneSpec:
    """A single fire-and-forget tone request."""
    kind: WaveType = WaveType.SQUARE
    frequency: float = 440.0
    duration: float = 0.08   # seconds
    volume: float = 0.08     # peak gain 0-1
    sweep_to: Optional[float] = None  # Hz at end of tone


def _phase(spec: ToneSpec, t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Oscillator phase in cycles at each sample time."""
    f0 = max(spec.frequency, 1.0)
    if spec.sweep_to is None:
        return f0 * t

    f1 = max(MIN_SWEEP_HZ, spec.sweep_to)
    ratio = f1 / f0
    if math.isclose(ratio, 1.0):
        return f0 * t
    # Integral of f0 * ratio**(t/d) dt
    log_ratio = math.log(ratio)
    return f0 * spec.duration / log_ratio * (np.power(ratio, t / spec.duration) - 1.0)


def _envelope(spec: ToneSpec, t: NDArray[np.float64]) -> NDArray[np.float64]:
    peak = max(spec.volume, SILENCE)
    attack = min(ATTACK, spec.duration)
    decay = max(spec.duration - attack, 1e-6)

    rising = SILENCE * np.power(peak / SILENCE, np.clip(t / attack, 0.0, 1.0))
    falling = peak * np.power(SILENCE / peak, np.clip((t - attack) / decay, 0.0, 1.0))
    return np.where(t < attack, rising, falling)


def _wave(kind: WaveType, phase: NDArray[np.float64]) -> NDArray[np.float64]:
    frac = np.mod(phase, 1.0)
    if kind == WaveType.SINE:
        return np.sin(2 * np.pi * phase)
    if kind == WaveType.SQUARE:
        return np.where(frac < 0.5, 1.0, -1.0)
    if kind == WaveType.SAWTOOTH:
        return 2.0 * frac - 1.0
    if kind == WaveType.TRIANGLE:
        return 4.0 * np.abs(frac - 0.5) - 1.0
    return np.zeros_like(phase)


def render_tone(spec: ToneSpec, sample_rate: int = 22050) -> NDArray[np.int16]:
    """Render a tone to mono signed 16-bit samples."""
    num_samples = max(1, int(sample_rate * spec.duration))
    t = np.arange(num_samples, dtype=np.float64) / sample_rate

    samples = _wave(spec.kind, _phase(spec, t)) * _envelope(spec, t)
    return np.clip(samples * 32767, -32767, 32767).astype(np.int16)
