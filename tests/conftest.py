from __future__ import annotations

import pytest

from wavesmith.instruments.base import SoundProfile, WaveContext, constant
from wavesmith.synth.engine import SynthEngine


def _sine(ctx: WaveContext, i: int, sample_rate: int, frequency: float, volume: float) -> float:
    return ctx.modulate[0](i, sample_rate, frequency, 0.0)


def _flat(ctx: WaveContext, i: int, sample_rate: int, frequency: float, volume: float) -> float:
    return 0.5


SINE = SoundProfile(name="sine", attack=constant(0.0), dampen=constant(1.0), wave=_sine)
FLAT = SoundProfile(name="flat", attack=constant(0.0), dampen=constant(0.0), wave=_flat)


@pytest.fixture
def engine() -> SynthEngine:
    """Low sample rate keeps pure-Python renders quick."""
    e = SynthEngine(sample_rate=4000)
    e.load_sound_profile(SINE, FLAT)
    return e
