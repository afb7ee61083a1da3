from __future__ import annotations

from wavesmith.instruments.base import SoundProfile, WaveContext, constant


def _dampen(sample_rate: int, frequency: float, volume: float) -> float:
    return 1.0 + frequency * 0.01


def _wave(ctx: WaveContext, i: int, sample_rate: int, frequency: float, volume: float) -> float:
    base = ctx.modulate[0]
    return ctx.modulate[1](
        i,
        sample_rate,
        frequency,
        base(i, sample_rate, frequency, 0.0)
        + 0.5 * base(i, sample_rate, frequency, 0.25)
        + 0.25 * base(i, sample_rate, frequency, 0.5),
    )


ORGAN = SoundProfile(name="organ", attack=constant(0.3), dampen=_dampen, wave=_wave)
