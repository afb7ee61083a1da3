from __future__ import annotations

import re

from wavesmith.errors import InvalidNote, InvalidNoteName

# Octave 4 reference frequencies (A4 = 440 Hz).
NOTE_FREQUENCIES: dict[str, float] = {
    "C": 261.63,
    "C#": 277.18,
    "D": 293.66,
    "D#": 311.13,
    "E": 329.63,
    "F": 349.23,
    "F#": 369.99,
    "G": 392.00,
    "G#": 415.30,
    "A": 440.00,
    "A#": 466.16,
    "B": 493.88,
}

PITCH_CLASSES: tuple[str, ...] = tuple(NOTE_FREQUENCIES)

MIN_OCTAVE = 1
MAX_OCTAVE = 8

_NOTE_NAME_RE = re.compile(r"^([A-G]#?)(-?\d+)$")


def clamp_octave(octave: float | int) -> int:
    return min(MAX_OCTAVE, max(MIN_OCTAVE, int(octave)))


def note_frequency(note: str, octave: int) -> float:
    """Frequency in Hz of ``note`` at an already clamped ``octave``."""
    try:
        base = NOTE_FREQUENCIES[note]
    except KeyError:
        raise InvalidNote(f"'{note}' is not a valid note.") from None
    return base * (2.0 ** (octave - 4))


def parse_note_name(name: str) -> tuple[str, int]:
    """Split ``"C#4"`` into ``("C#", 4)``.

    Raises InvalidNoteName for anything else (flats, lower case, missing octave).
    """
    m = _NOTE_NAME_RE.match(str(name).strip())
    if not m:
        raise InvalidNoteName(f"Invalid note name: {name}")
    return m.group(1), int(m.group(2))


def midi_pitch_to_name(pitch: int) -> str:
    """MIDI pitch number to scientific name (60 -> ``"C4"``)."""
    p = int(pitch)
    return f"{PITCH_CLASSES[p % 12]}{p // 12 - 1}"
