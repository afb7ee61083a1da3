from __future__ import annotations

import io
import logging
from bisect import bisect_right
from collections import defaultdict, deque

import mido

from wavesmith.errors import InvalidNoteName
from wavesmith.model.types import MidiNote, MidiTrack, SynthNote
from wavesmith.util.notes import midi_pitch_to_name, parse_note_name

logger = logging.getLogger(__name__)

DEFAULT_TEMPO = 500000  # us per beat (120 bpm)


class _TempoMap:
    """Tick -> seconds conversion honouring every set_tempo in the file."""

    def __init__(self, mf: mido.MidiFile) -> None:
        changes: dict[int, int] = {}
        for track in mf.tracks:
            tick = 0
            for msg in track:
                tick += msg.time
                if msg.type == "set_tempo":
                    changes[tick] = msg.tempo
        self._tpb = mf.ticks_per_beat
        self._ticks: list[int] = [0]
        self._tempos: list[int] = [changes.pop(0, DEFAULT_TEMPO)]
        self._seconds: list[float] = [0.0]
        for tick in sorted(changes):
            prev_sec = self._seconds[-1] + mido.tick2second(tick - self._ticks[-1], self._tpb, self._tempos[-1])
            self._ticks.append(tick)
            self._tempos.append(changes[tick])
            self._seconds.append(prev_sec)

    def seconds(self, tick: int) -> float:
        i = bisect_right(self._ticks, tick) - 1
        return self._seconds[i] + mido.tick2second(tick - self._ticks[i], self._tpb, self._tempos[i])


def _track_notes(track: mido.MidiTrack, tempo: _TempoMap) -> MidiTrack:
    out = MidiTrack()
    pending: dict[tuple[int, int], deque[tuple[int, int]]] = defaultdict(deque)
    tick = 0
    for msg in track:
        tick += msg.time
        if msg.type == "track_name":
            out.name = msg.name
        elif msg.type == "note_on" and msg.velocity > 0:
            pending[(msg.channel, msg.note)].append((tick, msg.velocity))
            if out.channel is None:
                out.channel = msg.channel
        elif msg.type == "note_off" or (msg.type == "note_on" and msg.velocity == 0):
            q = pending.get((msg.channel, msg.note))
            if not q:
                continue
            start_tick, vel = q.popleft()
            start = tempo.seconds(start_tick)
            out.notes.append(
                MidiNote(
                    name=midi_pitch_to_name(msg.note),
                    duration=tempo.seconds(tick) - start,
                    start_time=start,
                    velocity=vel,
                )
            )
    out.notes.sort(key=lambda n: n.start_time)
    return out


def midi_bytes_to_tracks(data: bytes) -> list[MidiTrack]:
    """Parse a Standard MIDI File buffer into tracks of timed notes."""
    mf = mido.MidiFile(file=io.BytesIO(bytes(data)))
    tempo = _TempoMap(mf)
    return [_track_notes(t, tempo) for t in mf.tracks]


def tracks_to_synth_notes(tracks: list[MidiTrack]) -> list[SynthNote]:
    """Flatten all tracks into one start-time ordered note list.

    Notes whose name does not parse are skipped with a warning.
    """
    notes: list[SynthNote] = []
    for track in tracks:
        for n in track.notes:
            try:
                pitch, octave = parse_note_name(n.name)
            except InvalidNoteName:
                logger.warning("Skipping invalid note: %s", n.name)
                continue
            notes.append(SynthNote(note=pitch, octave=octave, duration=n.duration, start_time=n.start_time))
    notes.sort(key=lambda n: n.start_time or 0.0)
    return notes


def midi_bytes_to_synth_notes(data: bytes) -> list[SynthNote]:
    return tracks_to_synth_notes(midi_bytes_to_tracks(data))
