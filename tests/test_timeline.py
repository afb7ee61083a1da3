from __future__ import annotations

import pytest

from wavesmith.audio.timeline import assemble, plan_timeline
from wavesmith.audio.wav import parse_header, strip_header, unpack_samples
from wavesmith.errors import InvalidNote, InvalidSound
from wavesmith.model.types import SynthNote
from wavesmith.synth.engine import SynthEngine


def _body(engine: SynthEngine, sound: str, n: SynthNote) -> bytes:
    return strip_header(engine.render(sound, n.note, n.octave, n.duration))


def test_notes_play_in_start_time_order(engine: SynthEngine) -> None:
    a = SynthNote(note="C", octave=4, duration=1.0, start_time=2.0)
    b = SynthNote(note="E", octave=4, duration=1.0, start_time=0.0)
    c = SynthNote(note="G", octave=4, duration=1.0, start_time=1.0)

    pcm = strip_header(assemble([a, b, c], "sine", engine=engine))
    expected = _body(engine, "sine", b) + _body(engine, "sine", c) + _body(engine, "sine", a)
    assert pcm == expected


def test_gap_inserts_exact_silence(engine: SynthEngine) -> None:
    engine.set_sample_rate(44100)
    notes = [
        SynthNote(note="A", octave=4, duration=1.0, start_time=0.0),
        SynthNote(note="A", octave=4, duration=1.0, start_time=3.0),
    ]
    samples = unpack_samples(strip_header(assemble(notes, "flat", engine=engine)))
    assert len(samples) == 4 * 44100
    assert all(s != 0 for s in samples[:44100])
    assert samples[44100 : 3 * 44100] == [0] * (2 * 44100)
    assert all(s != 0 for s in samples[3 * 44100 :])


def test_overlapping_notes_are_placed_back_to_back(engine: SynthEngine) -> None:
    a = SynthNote(note="C", octave=4, duration=0.2, start_time=0.0)
    b = SynthNote(note="D", octave=4, duration=0.2, start_time=0.1)
    pcm = strip_header(assemble([a, b], "sine", engine=engine))
    assert pcm == _body(engine, "sine", a) + _body(engine, "sine", b)


def test_untimed_notes_follow_the_cursor() -> None:
    notes = [
        SynthNote(note="C", octave=4, duration=0.5),
        SynthNote(note="D", octave=4, duration=0.25),
        SynthNote(note="E", octave=4, duration=0.5, start_time=1.0),
    ]
    plan = plan_timeline(notes)
    assert [p.start for p in plan] == [0.0, 0.5, 1.0]
    assert [p.gap for p in plan] == [0.0, 0.0, 0.25]


def test_header_wraps_whole_timeline(engine: SynthEngine) -> None:
    notes = [SynthNote(note="C", octave=4, duration=0.1, start_time=0.05)]
    wav = assemble(notes, "sine", engine=engine)
    info = parse_header(wav)
    assert info.sample_rate == 4000
    assert info.data_length == (200 + 400) * 2


def test_empty_timeline_is_a_valid_wav(engine: SynthEngine) -> None:
    wav = assemble([], "piano", engine=engine)
    assert parse_header(wav).data_length == 0


def test_parallel_render_matches_sequential() -> None:
    notes = [SynthNote(note=n, octave=3, duration=0.05, start_time=i * 0.1) for i, n in enumerate(["C", "D", "E", "C", "G"])]
    seq = assemble(notes, "piano", engine=SynthEngine(sample_rate=4000))
    par_engine = SynthEngine(sample_rate=4000)
    par = assemble(notes, "piano", engine=par_engine, workers=4)
    assert par == seq
    assert par_engine.cache_size() == 4


def test_bad_note_aborts_whole_timeline(engine: SynthEngine) -> None:
    notes = [
        SynthNote(note="C", octave=4, duration=0.05, start_time=0.0),
        SynthNote(note="Cb", octave=4, duration=0.05, start_time=0.1),
    ]
    with pytest.raises(InvalidNote):
        assemble(notes, "sine", engine=engine)


def test_unknown_instrument_fails_before_rendering(engine: SynthEngine) -> None:
    with pytest.raises(InvalidSound):
        assemble([SynthNote(note="C", octave=4, duration=0.05)], "kazoo", engine=engine)
    assert engine.cache_size() == 0


def test_zero_duration_note_keeps_later_gap(engine: SynthEngine) -> None:
    # A falsy duration renders 2s of audio but the cursor only moves by the note's own duration.
    notes = [
        SynthNote(note="A", octave=4, duration=0.0, start_time=0.0),
        SynthNote(note="A", octave=4, duration=1.0, start_time=3.0),
    ]
    plan = plan_timeline(notes)
    assert [p.gap for p in plan] == [0.0, 3.0]

    samples = unpack_samples(strip_header(assemble(notes, "flat", engine=engine)))
    assert len(samples) == (2 + 3 + 1) * 4000
    assert samples[2 * 4000 : 5 * 4000] == [0] * (3 * 4000)
