from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wavesmith.synth.engine import SynthEngine


def default_config_dir() -> Path:
    return Path.home() / ".config" / "wavesmith"


def default_config_path() -> Path:
    return default_config_dir() / "config.json"


@dataclass
class AppConfig:
    sample_rate: int = 44100
    volume: float = 1.0
    instrument: str = "piano"
    codec: str = "mp3"  # mp3 or m4a
    bitrate: str = "128k"
    seed: int = 0
    workers: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "sample_rate": self.sample_rate,
            "volume": self.volume,
            "instrument": self.instrument,
            "codec": self.codec,
            "bitrate": self.bitrate,
            "seed": self.seed,
            "workers": self.workers,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AppConfig":
        base = AppConfig()
        return AppConfig(
            sample_rate=int(d.get("sample_rate") or base.sample_rate),
            volume=float(d.get("volume", base.volume)),
            instrument=str(d.get("instrument") or base.instrument),
            codec=str(d.get("codec") or base.codec),
            bitrate=str(d.get("bitrate") or base.bitrate),
            seed=int(d.get("seed") or 0),
            workers=max(1, int(d.get("workers") or 1)),
        )

    def build_engine(self, *, debug: bool = False) -> SynthEngine:
        return SynthEngine(sample_rate=self.sample_rate, volume=self.volume, seed=self.seed, debug=debug)


def load_config(path: Path | None = None) -> AppConfig:
    p = path or default_config_path()
    if not p.exists():
        return AppConfig()
    data = json.loads(p.read_text(encoding="utf-8"))
    return AppConfig.from_dict(data)


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    p = path or default_config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(cfg.to_dict(), indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return p
