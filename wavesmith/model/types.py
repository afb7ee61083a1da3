from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SynthNote:
    """A note ready for synthesis.

    Times are in seconds. ``start_time`` of None means "right after the
    previous note" when the timeline is assembled.
    """

    note: str
    octave: int
    duration: float
    start_time: float | None = None

    def __post_init__(self) -> None:
        self.octave = int(self.octave)
        self.duration = float(self.duration)
        if self.duration < 0:
            raise ValueError("duration must be >= 0")
        if self.start_time is not None:
            self.start_time = float(self.start_time)
            if self.start_time < 0:
                raise ValueError("start_time must be >= 0")


@dataclass
class MidiNote:
    """A note as read from a MIDI track: scientific name plus times in seconds."""

    name: str
    duration: float
    start_time: float
    velocity: int = 100


@dataclass
class MidiTrack:
    name: str = ""
    channel: int | None = None
    notes: list[MidiNote] = field(default_factory=list)
