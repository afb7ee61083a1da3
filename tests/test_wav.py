from __future__ import annotations

import struct

import pytest

from wavesmith.audio.wav import (
    HEADER_SIZE,
    build_header,
    pack_samples,
    parse_header,
    silence,
    strip_header,
    unpack_samples,
    wrap_pcm,
)
from wavesmith.errors import MalformedContainer


def test_header_layout_matches_canonical_pcm() -> None:
    h = build_header(1000, sample_rate=22050)
    assert len(h) == HEADER_SIZE
    assert h[0:4] == b"RIFF"
    assert struct.unpack_from("<I", h, 4)[0] == 36 + 1000
    assert h[8:12] == b"WAVE"
    assert h[12:16] == b"fmt "
    assert struct.unpack_from("<IHHIIHH", h, 16) == (16, 1, 1, 22050, 44100, 2, 16)
    assert h[36:40] == b"data"
    assert struct.unpack_from("<I", h, 40)[0] == 1000


def test_strip_header_recovers_pcm_for_any_length() -> None:
    for n in (0, 2, 7, 4410):
        pcm = bytes((i * 37) & 0xFF for i in range(n))
        assert strip_header(build_header(n) + pcm) == pcm


def test_wrap_pcm_header_fields_match_payload() -> None:
    pcm = pack_samples([0, 1, -1, 32767, -32768])
    info = parse_header(wrap_pcm(pcm, sample_rate=8000))
    assert info.data_length == len(pcm) == 10
    assert info.sample_rate == 8000
    assert info.channels == 1
    assert info.bits_per_sample == 16


def test_samples_are_little_endian_16_bit() -> None:
    pcm = pack_samples([1, -2])
    assert pcm == b"\x01\x00\xfe\xff"
    assert unpack_samples(pcm) == [1, -2]


def test_strip_header_rejects_garbage() -> None:
    with pytest.raises(MalformedContainer):
        strip_header(b"not a wav")
    with pytest.raises(MalformedContainer):
        strip_header(b"X" * 100)


def test_strip_header_rejects_length_mismatch() -> None:
    wav = build_header(10) + b"\x00" * 4
    with pytest.raises(MalformedContainer):
        strip_header(wav)


def test_silence_is_floor_of_gap_samples() -> None:
    assert silence(0.0, 44100) == b""
    assert silence(-1.0, 44100) == b""
    assert len(silence(2.0, 44100)) == 2 * 44100 * 2
    assert set(silence(0.5, 8000)) == {0}
