from __future__ import annotations

import math
from dataclasses import dataclass, field

from wavesmith.instruments.base import SoundProfile, WaveContext, constant


@dataclass
class PluckState:
    """Karplus-Strong delay line for a single render."""

    table: list[float] = field(default_factory=list)
    play: int = 0
    period_count: int = 0


def _wave(ctx: WaveContext, i: int, sample_rate: int, frequency: float, volume: float) -> float:
    st: PluckState = ctx.state
    buf = st.table

    period = sample_rate / frequency
    whole = math.floor(period)
    ceil = math.ceil(period)
    frac_hundredths = math.floor((period - whole) * 100)

    # Seed the delay line with +-1 noise before any feedback happens.
    if len(buf) <= ceil:
        buf.append(float(ctx.rng.randint(0, 1) * 2 - 1))
        return buf[-1]

    idx = st.play
    nxt = 0 if idx >= len(buf) - 1 else idx + 1
    buf[idx] = (buf[nxt] + buf[idx]) * 0.5

    reset = False
    if idx >= whole:
        if idx < ceil:
            # Fractional period: wrap early on some cycles to keep pitch.
            if st.period_count % 100 >= frac_hundredths:
                reset = True
                buf[idx + 1] = (buf[0] + buf[idx + 1]) * 0.5
                st.period_count += 1
        else:
            reset = True

    out = buf[idx]
    st.play = 0 if reset else idx + 1
    return out


ACOUSTIC = SoundProfile(
    name="acoustic",
    attack=constant(0.002),
    dampen=constant(1.0),
    wave=_wave,
    new_state=PluckState,
)
