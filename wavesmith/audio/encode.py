from __future__ import annotations

import logging
import shutil
import subprocess

from wavesmith.audio.wav import parse_header, strip_header

logger = logging.getLogger(__name__)

DEFAULT_BITRATE = "128k"

_CODECS = {
    # codec -> (ffmpeg encoder, container format when writing to a pipe)
    "mp3": ("libmp3lame", "mp3"),
    "m4a": ("aac", "ipod"),
}


def ffmpeg_path() -> str | None:
    return shutil.which("ffmpeg")


def build_encode_cmd(*, sample_rate: int, channels: int = 1, codec: str = "mp3", bitrate: str = DEFAULT_BITRATE) -> list[str]:
    if codec not in _CODECS:
        raise ValueError("codec must be mp3 or m4a")
    encoder, fmt = _CODECS[codec]
    cmd: list[str] = [
        "ffmpeg",
        "-y",
        "-hide_banner",
        "-loglevel",
        "error",
        "-f",
        "s16le",
        "-ar",
        str(int(sample_rate)),
        "-ac",
        str(int(channels)),
        "-i",
        "pipe:0",
        "-codec:a",
        encoder,
        "-b:a",
        bitrate,
    ]
    if codec == "m4a":
        # mp4 muxer cannot seek back on a pipe.
        cmd += ["-movflags", "frag_keyframe+empty_moov"]
    cmd += ["-f", fmt, "pipe:1"]
    return cmd


def encode_pcm(
    pcm: bytes,
    *,
    sample_rate: int = 44100,
    channels: int = 1,
    codec: str = "mp3",
    bitrate: str = DEFAULT_BITRATE,
) -> bytes:
    """Compress raw little-endian 16-bit PCM via ffmpeg.

    The whole buffer is written to ffmpeg's stdin and stdin is closed, which
    flushes the encoder; the returned bytes are everything it produced.
    """
    cmd = build_encode_cmd(sample_rate=sample_rate, channels=channels, codec=codec, bitrate=bitrate)
    logger.debug("encoding %d bytes PCM to %s @ %s", len(pcm), codec, bitrate)
    res = subprocess.run(cmd, input=bytes(pcm), stdout=subprocess.PIPE, check=True)
    return res.stdout


def wav_to_compressed(wav: bytes, *, codec: str = "mp3", bitrate: str = DEFAULT_BITRATE) -> bytes:
    info = parse_header(wav)
    return encode_pcm(strip_header(wav), sample_rate=info.sample_rate, channels=info.channels, codec=codec, bitrate=bitrate)
