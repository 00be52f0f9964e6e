"""
RETROCADE audio - synthesized arcade tones.
"""

from .engine import AudioEngine, get_audio_engine
from .synth import ToneSpec, WaveType, render_tone

__all__ = ["AudioEngine", "get_audio_engine", "ToneSpec", "WaveType", "render_tone"]
