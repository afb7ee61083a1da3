from __future__ import annotations

from wavesmith.instruments.base import SoundProfile, WaveContext, constant


def _wave(ctx: WaveContext, i: int, sample_rate: int, frequency: float, volume: float) -> float:
    base = ctx.modulate[0]
    mod = ctx.modulate[1:]
    saturated = (
        base(i, sample_rate, frequency, 0.0) ** 3
        + base(i, sample_rate, frequency, 0.5) ** 5
        + base(i, sample_rate, frequency, 1.0) ** 7
    )
    return mod[0](
        i,
        sample_rate,
        frequency,
        mod[9](i, sample_rate, frequency, mod[2](i, sample_rate, frequency, saturated))
        + mod[8](i, sample_rate, frequency, base(i, sample_rate, frequency, 1.75)),
    )


EDM = SoundProfile(name="edm", attack=constant(0.002), dampen=constant(1.0), wave=_wave)
