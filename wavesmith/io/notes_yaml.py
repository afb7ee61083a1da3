from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from wavesmith.errors import InvalidNoteName
from wavesmith.model.types import SynthNote
from wavesmith.util.notes import parse_note_name

logger = logging.getLogger(__name__)


@dataclass
class NoteList:
    instrument: str | None = None
    notes: list[SynthNote] = field(default_factory=list)


def _note_from_dict(d: dict[str, Any]) -> SynthNote:
    if "name" in d:
        pitch, octave = parse_note_name(str(d["name"]))
    else:
        if "note" not in d or "octave" not in d:
            raise ValueError(f"note entry needs 'name' or 'note'+'octave': {d}")
        pitch, octave = str(d["note"]), int(d["octave"])
    start = d.get("start", d.get("start_time"))
    return SynthNote(
        note=pitch,
        octave=octave,
        duration=float(d.get("duration", 0.0) or 0.0),
        start_time=None if start is None else float(start),
    )


def notes_from_data(data: Any) -> NoteList:
    if isinstance(data, list):
        data = {"notes": data}
    if not isinstance(data, dict):
        raise ValueError("note list YAML must be a mapping or a list")
    entries = data.get("notes") or []
    if not isinstance(entries, list):
        raise ValueError("'notes' must be a list")

    out = NoteList(instrument=(str(data["instrument"]) if data.get("instrument") else None))
    for e in entries:
        if isinstance(e, str):
            e = {"name": e}
        if not isinstance(e, dict):
            raise ValueError(f"invalid note entry: {e!r}")
        try:
            out.notes.append(_note_from_dict(e))
        except InvalidNoteName:
            logger.warning("Skipping invalid note: %s", e.get("name"))
    return out


def load_notes_yaml(path: str | Path) -> NoteList:
    """Load a note list such as::

        instrument: organ
        notes:
          - {name: C4, duration: 0.5, start: 0}
          - {note: "E", octave: 4, duration: 0.5}
    """
    p = Path(path)
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    return notes_from_data(data)
