from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from wavesmith.synth.engine import SynthEngine


class Instrument:
    """Named handle onto one sound profile of an engine."""

    def __init__(self, engine: "SynthEngine", name: str, sound_id: int) -> None:
        self._engine = engine
        self.name = name
        self.sound_id = sound_id

    def generate(self, note: str, octave: int, duration: float | None = None) -> bytes:
        return self._engine.render(self.sound_id, note, octave, duration)

    def __repr__(self) -> str:
        return f"Instrument(name={self.name!r}, sound_id={self.sound_id})"
