from __future__ import annotations

import io
import logging

import mido
import pytest

from wavesmith.errors import InvalidNoteName
from wavesmith.io.midi import midi_bytes_to_synth_notes, midi_bytes_to_tracks, tracks_to_synth_notes
from wavesmith.model.types import MidiNote, MidiTrack
from wavesmith.util.notes import midi_pitch_to_name, parse_note_name


def _midi_bytes(tempo_bpm: float = 120) -> bytes:
    mf = mido.MidiFile(ticks_per_beat=480)

    tempo_track = mido.MidiTrack()
    tempo_track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(tempo_bpm), time=0))
    mf.tracks.append(tempo_track)

    melody = mido.MidiTrack()
    melody.append(mido.MetaMessage("track_name", name="Melody", time=0))
    # E4 at beat 1, C4 at beat 0 (written second to check sorting across tracks).
    melody.append(mido.Message("note_on", note=64, velocity=90, channel=0, time=480))
    melody.append(mido.Message("note_off", note=64, velocity=0, channel=0, time=480))
    mf.tracks.append(melody)

    bass = mido.MidiTrack()
    bass.append(mido.Message("note_on", note=60, velocity=100, channel=1, time=0))
    # note_on with velocity 0 is a note_off.
    bass.append(mido.Message("note_on", note=60, velocity=0, channel=1, time=240))
    mf.tracks.append(bass)

    buf = io.BytesIO()
    mf.save(file=buf)
    return buf.getvalue()


def test_parse_note_name() -> None:
    assert parse_note_name("C#4") == ("C#", 4)
    assert parse_note_name("A-1") == ("A", -1)
    for bad in ("Db4", "c4", "C", "H2", "C#"):
        with pytest.raises(InvalidNoteName):
            parse_note_name(bad)


def test_midi_pitch_names() -> None:
    assert midi_pitch_to_name(60) == "C4"
    assert midi_pitch_to_name(61) == "C#4"
    assert midi_pitch_to_name(69) == "A4"
    assert midi_pitch_to_name(0) == "C-1"


def test_tracks_carry_names_and_seconds() -> None:
    tracks = midi_bytes_to_tracks(_midi_bytes())
    assert len(tracks) == 3
    assert tracks[0].notes == []

    melody = tracks[1]
    assert melody.name == "Melody"
    assert melody.channel == 0
    assert [n.name for n in melody.notes] == ["E4"]
    assert melody.notes[0].start_time == pytest.approx(0.5)
    assert melody.notes[0].duration == pytest.approx(0.5)
    assert melody.notes[0].velocity == 90

    assert tracks[2].notes[0].duration == pytest.approx(0.25)


def test_tempo_changes_scale_times() -> None:
    tracks = midi_bytes_to_tracks(_midi_bytes(tempo_bpm=60))
    n = tracks[1].notes[0]
    assert n.start_time == pytest.approx(1.0)
    assert n.duration == pytest.approx(1.0)


def test_tracks_flatten_to_time_ordered_notes() -> None:
    notes = midi_bytes_to_synth_notes(_midi_bytes())
    assert [(n.note, n.octave) for n in notes] == [("C", 4), ("E", 4)]
    assert [n.start_time for n in notes] == pytest.approx([0.0, 0.5])


def test_invalid_names_are_skipped_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    track = MidiTrack(
        name="t",
        notes=[
            MidiNote(name="Bb3", duration=0.5, start_time=0.0),
            MidiNote(name="G3", duration=0.5, start_time=0.5),
        ],
    )
    with caplog.at_level(logging.WARNING, logger="wavesmith.io.midi"):
        notes = tracks_to_synth_notes([track])
    assert [(n.note, n.octave) for n in notes] == [("G", 3)]
    assert any("Bb3" in r.getMessage() for r in caplog.records)
