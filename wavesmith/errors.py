from __future__ import annotations


class SynthError(ValueError):
    """Base class for all rendering errors."""


class InvalidNote(SynthError):
    """Pitch class not in the frequency table."""


class InvalidNoteName(SynthError):
    """Note name that does not match ``<PitchClass><Octave>``."""


class InvalidSound(SynthError):
    """Unknown instrument name or index."""


class MalformedContainer(SynthError):
    """Buffer is not a canonical 44-byte-header PCM WAV."""
