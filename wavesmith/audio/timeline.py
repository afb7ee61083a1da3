from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

from wavesmith.audio.wav import silence, strip_header, wrap_pcm
from wavesmith.model.types import SynthNote
from wavesmith.synth.engine import SynthEngine
from wavesmith.synth.instrument import Instrument

logger = logging.getLogger(__name__)


@dataclass
class Placement:
    note: SynthNote
    start: float
    gap: float


def plan_timeline(notes: Sequence[SynthNote]) -> list[Placement]:
    """Order notes and work out the silence before each one.

    Stable sort on start time (untimed notes sort as 0.0 and then start at
    the running cursor). Overlapping notes are placed back to back.
    """
    ordered = sorted(notes, key=lambda n: n.start_time if n.start_time is not None else 0.0)
    out: list[Placement] = []
    cursor = 0.0
    for n in ordered:
        start = n.start_time if n.start_time is not None else cursor
        out.append(Placement(note=n, start=start, gap=start - cursor))
        cursor = start + n.duration
    return out


def assemble(
    notes: Sequence[SynthNote],
    instrument_name: str | int = "piano",
    *,
    engine: SynthEngine,
    workers: int = 1,
) -> bytes:
    """Render a note list into one continuous mono WAV buffer.

    With ``workers > 1`` notes render on a thread pool; concatenation still
    waits for every note and keeps timeline order. The engine settings are
    held for the whole call, so every note and the header share one rate.
    """
    instrument = engine.create_instrument(instrument_name)
    plan = plan_timeline(notes)

    with engine.session() as sample_rate:
        bodies = _render_all(instrument, plan, workers)

    parts: list[bytes] = []
    for p, body in zip(plan, bodies):
        if p.gap > 0:
            parts.append(silence(p.gap, sample_rate))
        parts.append(body)

    pcm = b"".join(parts)
    logger.debug("assembled %d notes with %s: %d bytes PCM", len(plan), instrument.name, len(pcm))
    return wrap_pcm(pcm, sample_rate=sample_rate)


def _render_one(instrument: Instrument, note: SynthNote) -> bytes:
    return strip_header(instrument.generate(note.note, note.octave, note.duration))


def _render_all(instrument: Instrument, plan: list[Placement], workers: int) -> list[bytes]:
    if workers <= 1 or len(plan) <= 1:
        return [_render_one(instrument, p.note) for p in plan]
    with ThreadPoolExecutor(max_workers=int(workers)) as pool:
        futures = [pool.submit(_render_one, instrument, p.note) for p in plan]
        return [f.result() for f in futures]
