"""wavesmith: note lists and MIDI files to mono 16-bit audio."""

from wavesmith.pipeline import render_midi_to_audio, render_notes_to_audio, render_notes_to_wav

__all__ = ["render_midi_to_audio", "render_notes_to_audio", "render_notes_to_wav"]
