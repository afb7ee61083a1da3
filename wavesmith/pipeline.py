"""Public entry points: note lists (or MIDI bytes) to WAV or compressed audio."""

from __future__ import annotations

import threading
from typing import Sequence

from wavesmith.audio.encode import DEFAULT_BITRATE, wav_to_compressed
from wavesmith.audio.timeline import assemble
from wavesmith.io.midi import midi_bytes_to_synth_notes
from wavesmith.model.types import SynthNote
from wavesmith.synth.engine import SynthEngine

_default_engine: SynthEngine | None = None
_default_lock = threading.Lock()


def default_engine() -> SynthEngine:
    """Convenience engine for the module-level render helpers.

    Built with the default registry and settings on first use and only
    reached when a caller omits ``engine=``. Library code that changes
    settings or loads profiles should build its own ``SynthEngine`` (or use
    ``AppConfig.build_engine``) and pass it explicitly.
    """
    global _default_engine
    with _default_lock:
        if _default_engine is None:
            _default_engine = SynthEngine()
        return _default_engine


def render_notes_to_wav(
    notes: Sequence[SynthNote],
    instrument_name: str | int = "piano",
    *,
    engine: SynthEngine | None = None,
    workers: int = 1,
) -> bytes:
    return assemble(notes, instrument_name, engine=engine or default_engine(), workers=workers)


def render_notes_to_audio(
    notes: Sequence[SynthNote],
    instrument_name: str | int = "piano",
    *,
    engine: SynthEngine | None = None,
    workers: int = 1,
    codec: str = "mp3",
    bitrate: str = DEFAULT_BITRATE,
) -> bytes:
    wav = render_notes_to_wav(notes, instrument_name, engine=engine, workers=workers)
    return wav_to_compressed(wav, codec=codec, bitrate=bitrate)


def render_midi_to_audio(
    midi: bytes,
    instrument_name: str | int = "piano",
    *,
    engine: SynthEngine | None = None,
    workers: int = 1,
    codec: str = "mp3",
    bitrate: str = DEFAULT_BITRATE,
) -> bytes:
    notes = midi_bytes_to_synth_notes(midi)
    return render_notes_to_audio(notes, instrument_name, engine=engine, workers=workers, codec=codec, bitrate=bitrate)
