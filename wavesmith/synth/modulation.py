"""Oscillator primitives shared by all sound profiles.

Every function has the signature ``f(i, sample_rate, frequency, x)`` where
``i`` is the sample index and ``x`` a phase offset (which profiles also use
to feed one oscillator into another). Profiles address them by position.
"""

from __future__ import annotations

import math
from typing import Callable

ModulationFunction = Callable[[int, int, float, float], float]

TWO_PI = 2.0 * math.pi


def _sine(multiplier: float, amplitude: float = 1.0) -> ModulationFunction:
    k = multiplier * math.pi

    def fn(i: int, sample_rate: int, frequency: float, x: float = 0.0) -> float:
        return amplitude * math.sin(k * (i / sample_rate * frequency) + x)

    fn.__name__ = f"sine_{multiplier:g}pi_{amplitude:g}"
    return fn


def fundamental(i: int, sample_rate: int, frequency: float, x: float = 0.0) -> float:
    return math.sin(TWO_PI * (i / sample_rate) * frequency + x)


DEFAULT_MODULATIONS: tuple[ModulationFunction, ...] = (
    fundamental,
    _sine(2.0),
    _sine(4.0),
    _sine(8.0),
    _sine(0.5),
    _sine(0.25),
    _sine(2.0, 0.5),
    _sine(4.0, 0.5),
    _sine(8.0, 0.5),
    _sine(0.5, 0.5),
    _sine(0.25, 0.5),
)
