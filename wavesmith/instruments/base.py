from __future__ import annotations

import math
from dataclasses import dataclass, field
from random import Random
from typing import Any, Callable, Protocol, Sequence

from wavesmith.synth.modulation import ModulationFunction


@dataclass
class WaveContext:
    """Per-render scratch handed to a profile's wave function.

    A fresh context is built for every render call; ``state`` comes from the
    profile's ``new_state`` factory and ``rng`` is seeded from the note key.
    """

    modulate: Sequence[ModulationFunction]
    state: Any = None
    rng: Random = field(default_factory=Random)


class WaveFunction(Protocol):
    def __call__(self, ctx: WaveContext, i: int, sample_rate: int, frequency: float, volume: float) -> float:
        ...


EnvelopeFunction = Callable[[int, float, float], float]


@dataclass(frozen=True)
class SoundProfile:
    """Declarative instrument: envelope timing plus a per-sample wave.

    attack(sample_rate, frequency, volume) -> seconds
    dampen(sample_rate, frequency, volume) -> decay exponent
    """

    name: str
    attack: EnvelopeFunction
    dampen: EnvelopeFunction
    wave: WaveFunction
    new_state: Callable[[], Any] | None = None

    def __post_init__(self) -> None:
        if not str(self.name).strip():
            raise ValueError("sound profile name must not be empty")


def constant(value: float) -> EnvelopeFunction:
    def fn(sample_rate: int, frequency: float, volume: float) -> float:
        return value

    return fn


def log_ratio(frequency: float, volume: float, sample_rate: int) -> float:
    """ln(frequency * volume / sample_rate); 0 for a silent engine."""
    r = frequency * volume / float(sample_rate)
    if r <= 0:
        return 0.0
    return math.log(r)
