from __future__ import annotations

import struct
import sys
from array import array
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from wavesmith.errors import MalformedContainer

HEADER_SIZE = 44

# RIFF size, "WAVE", fmt chunk (PCM), "data" chunk size.
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True)
class WavInfo:
    sample_rate: int
    channels: int
    bits_per_sample: int
    data_length: int


def build_header(data_length: int, sample_rate: int = 44100, channels: int = 1, bits_per_sample: int = 16) -> bytes:
    if data_length < 0:
        raise ValueError("data_length must be >= 0")
    block_align = channels * bits_per_sample // 8
    byte_rate = sample_rate * block_align
    return _HEADER.pack(
        b"RIFF",
        36 + data_length,
        b"WAVE",
        b"fmt ",
        16,
        1,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        data_length,
    )


def parse_header(buffer: bytes) -> WavInfo:
    """Validate a canonical 44-byte PCM header and return its fields."""
    if len(buffer) < HEADER_SIZE:
        raise MalformedContainer(f"buffer too short for WAV header ({len(buffer)} bytes)")
    (riff, riff_size, wave_id, fmt_id, fmt_size, fmt_tag, channels, sample_rate, _byte_rate, _block_align, bits, data_id, data_len) = _HEADER.unpack_from(buffer, 0)
    if riff != b"RIFF" or wave_id != b"WAVE":
        raise MalformedContainer("missing RIFF/WAVE markers")
    if fmt_id != b"fmt " or fmt_size != 16 or fmt_tag != 1:
        raise MalformedContainer("expected a 16-byte PCM fmt chunk")
    if data_id != b"data":
        raise MalformedContainer("missing data chunk marker")
    if data_len != len(buffer) - HEADER_SIZE or riff_size != 36 + data_len:
        raise MalformedContainer(f"declared data length {data_len} does not match payload {len(buffer) - HEADER_SIZE}")
    return WavInfo(sample_rate=sample_rate, channels=channels, bits_per_sample=bits, data_length=data_len)


def strip_header(buffer: bytes) -> bytes:
    parse_header(buffer)
    return bytes(buffer[HEADER_SIZE:])


def wrap_pcm(pcm: bytes, *, sample_rate: int = 44100, channels: int = 1, bits_per_sample: int = 16) -> bytes:
    return build_header(len(pcm), sample_rate=sample_rate, channels=channels, bits_per_sample=bits_per_sample) + bytes(pcm)


def pack_samples(samples: Iterable[int]) -> bytes:
    """16-bit signed samples to little-endian PCM bytes."""
    a = array("h", samples)
    if sys.byteorder != "little":
        a.byteswap()
    return a.tobytes()


def unpack_samples(pcm: bytes) -> list[int]:
    a = array("h")
    a.frombytes(bytes(pcm[: len(pcm) - (len(pcm) % 2)]))
    if sys.byteorder != "little":
        a.byteswap()
    return a.tolist()


def silence(seconds: float, sample_rate: int) -> bytes:
    if seconds <= 0:
        return b""
    return bytes(int(seconds * sample_rate) * 2)


def write_wav(path: Path, wav: bytes) -> Path:
    parse_header(wav)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(wav)
    return path
