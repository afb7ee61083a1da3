from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml

from wavesmith.audio.encode import ffmpeg_path, wav_to_compressed
from wavesmith.audio.timeline import assemble
from wavesmith.audio.wav import write_wav
from wavesmith.errors import SynthError
from wavesmith.io.midi import midi_bytes_to_synth_notes
from wavesmith.io.notes_yaml import load_notes_yaml
from wavesmith.model.types import SynthNote
from wavesmith.util.config import AppConfig, load_config
from wavesmith.util.log import setup_logging


@dataclass
class DoctorResult:
    ok: bool
    notes: list[str]


def _doctor() -> DoctorResult:
    notes: list[str] = []
    ok = True

    ffmpeg = ffmpeg_path()
    if ffmpeg:
        notes.append(f"ffmpeg: OK ({ffmpeg})")
    else:
        ok = False
        notes.append("ffmpeg: MISSING (needed for MP3/M4A encodes; WAV output still works)")

    notes.append(f"python: {sys.version.split()[0]}")
    notes.append(f"platform: {sys.platform}")
    return DoctorResult(ok=ok, notes=notes)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wavesmith",
        add_help=True,
        formatter_class=argparse.RawTextHelpFormatter,
        description="wavesmith: render note lists and MIDI files with a small additive synthesizer\n",
    )

    p.add_argument("--version", action="store_true", help="Print version and exit.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG (incl. render timings).")
    p.add_argument("--config", default=None, help="Path to config JSON (default: ~/.config/wavesmith/config.json)")

    sub = p.add_subparsers(dest="cmd")
    sub.add_parser("doctor", help="Check for required external tools (ffmpeg).")
    sub.add_parser("sounds", help="List built-in instruments.")

    r = sub.add_parser("render", help="Render a MIDI file or YAML note list to audio.")
    r.add_argument("input", help="Path to .mid/.midi or .yaml/.yml note list")
    r.add_argument("-o", "--out", required=True, help="Output path (.wav, .mp3, .m4a) or '-' for stdout")
    r.add_argument("--instrument", default=None, help="Instrument name (piano, organ, acoustic, edm)")
    r.add_argument("--format", dest="fmt", choices=["wav", "mp3", "m4a"], default=None, help="Output format (default: from extension)")
    r.add_argument("--sample-rate", dest="sample_rate", type=int, default=None)
    r.add_argument("--volume", type=float, default=None, help="0.0..1.0")
    r.add_argument("--bitrate", default=None, help="Encoder bitrate, e.g. 128k")
    r.add_argument("--workers", type=int, default=None, help="Render notes on N threads")

    return p


def _load_input(path: Path) -> tuple[list[SynthNote], str | None]:
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        nl = load_notes_yaml(path)
        return nl.notes, nl.instrument
    if suffix in {".mid", ".midi"}:
        return midi_bytes_to_synth_notes(path.read_bytes()), None
    raise SystemExit(f"ERROR: unsupported input type: {path.suffix or path.name}")


def _output_format(out: str, fmt: str | None, cfg: AppConfig) -> str:
    if fmt:
        return fmt
    suffix = Path(out).suffix.lower().lstrip(".")
    if suffix in {"wav", "mp3", "m4a"}:
        return suffix
    return cfg.codec


def _render(args: argparse.Namespace, cfg: AppConfig) -> None:
    if args.sample_rate is not None:
        cfg.sample_rate = int(args.sample_rate)
    if args.volume is not None:
        cfg.volume = float(args.volume)
    if args.bitrate:
        cfg.bitrate = str(args.bitrate)
    if args.workers is not None:
        cfg.workers = max(1, int(args.workers))

    inp = Path(args.input).expanduser()
    if not inp.exists():
        raise SystemExit(f"ERROR: input not found: {inp}")
    try:
        notes, file_instrument = _load_input(inp)
    except (ValueError, yaml.YAMLError) as e:
        raise SystemExit(f"ERROR: {inp}: {e}")
    instrument = args.instrument or file_instrument or cfg.instrument

    engine = cfg.build_engine(debug=args.verbose >= 2)
    try:
        wav = assemble(notes, instrument, engine=engine, workers=cfg.workers)
    except SynthError as e:
        raise SystemExit(f"ERROR: {e}")

    fmt = _output_format(args.out, args.fmt, cfg)
    if fmt == "wav":
        data = wav
    else:
        if ffmpeg_path() is None:
            raise SystemExit("ERROR: ffmpeg not found (needed for MP3/M4A). Run: wavesmith doctor")
        data = wav_to_compressed(wav, codec=fmt, bitrate=cfg.bitrate)

    if args.out.strip() == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    out = Path(args.out).expanduser()
    if fmt == "wav":
        write_wav(out, data)
    else:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(data)
    print(f"rendered: {inp} -> {out} ({len(notes)} notes, {instrument})")


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)

    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    setup_logging(level)

    if getattr(args, "version", False):
        try:
            from importlib.metadata import version

            v = version("wavesmith")
        except Exception:
            v = "0.0.0"
        print(f"wavesmith {v}")
        return

    cfg = load_config(Path(args.config).expanduser() if args.config else None)

    if args.cmd == "doctor":
        res = _doctor()
        status = "OK" if res.ok else "MISSING_DEPS"
        print(f"wavesmith doctor: {status}")
        for n in res.notes:
            print(f"- {n}")
        if not res.ok:
            print("\nLinux (Debian/Ubuntu): sudo apt-get install ffmpeg")
            print("macOS: brew install ffmpeg")
        return

    if args.cmd == "sounds":
        for name in cfg.build_engine().list_sounds():
            print(name)
        return

    if args.cmd == "render":
        _render(args, cfg)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
