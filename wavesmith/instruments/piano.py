from __future__ import annotations

from wavesmith.instruments.base import SoundProfile, WaveContext, constant, log_ratio


def _dampen(sample_rate: int, frequency: float, volume: float) -> float:
    # Struck string: higher and louder notes die away faster.
    return (0.5 * log_ratio(frequency, volume, sample_rate)) ** 2


def _wave(ctx: WaveContext, i: int, sample_rate: int, frequency: float, volume: float) -> float:
    base = ctx.modulate[0]
    return ctx.modulate[1](
        i,
        sample_rate,
        frequency,
        base(i, sample_rate, frequency, 0.0) ** 2
        + 0.75 * base(i, sample_rate, frequency, 0.25)
        + 0.1 * base(i, sample_rate, frequency, 0.5),
    )


PIANO = SoundProfile(name="piano", attack=constant(0.002), dampen=_dampen, wave=_wave)
