from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from random import Random
from typing import Iterable, Iterator, Tuple

from wavesmith.audio.wav import pack_samples, wrap_pcm
from wavesmith.errors import InvalidSound
from wavesmith.instruments.base import SoundProfile, WaveContext
from wavesmith.instruments.registry import SoundRegistry, default_registry
from wavesmith.synth.instrument import Instrument
from wavesmith.synth.modulation import DEFAULT_MODULATIONS, ModulationFunction
from wavesmith.util.notes import clamp_octave, note_frequency

logger = logging.getLogger(__name__)

MIN_SAMPLE_RATE = 4000
MAX_SAMPLE_RATE = 44100
MAX_VOLUME = 32767
DEFAULT_DURATION = 2.0

CacheKey = Tuple[int, int, str, float]


def _clip16(v: float) -> int:
    if v != v:  # NaN
        return 0
    if v >= MAX_VOLUME:
        return MAX_VOLUME
    if v <= -MAX_VOLUME - 1:
        return -MAX_VOLUME - 1
    return int(v)


class _SettingsGuard:
    """Shared/exclusive lock: renders share it, settings changes take it alone.

    Shared holds nest on one thread (readers are never blocked by a waiting
    writer). Changing settings while holding the shared side deadlocks.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def shared(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SynthEngine:
    """Additive synthesizer with a memoizing render cache.

    One engine owns its sound registry, its modulation table and its cache.
    Renders of distinct keys may run on different threads; a key is computed
    at most once per settings. Sample rate and volume changes wait
    for every in-flight render (and every open ``session``) to finish.
    """

    channels = 1
    bits_per_sample = 16

    def __init__(
        self,
        registry: SoundRegistry | None = None,
        *,
        modulations: Iterable[ModulationFunction] | None = None,
        sample_rate: int = 44100,
        volume: float = 1.0,
        seed: int = 0,
        debug: bool = False,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._modulations: list[ModulationFunction] = list(modulations if modulations is not None else DEFAULT_MODULATIONS)
        self._seed = int(seed)
        self._debug = bool(debug)

        self._lock = threading.RLock()
        self._guard = _SettingsGuard()
        self._key_locks: dict[CacheKey, threading.Lock] = {}
        self._cache: dict[CacheKey, bytes] = {}

        self._sample_rate = MAX_SAMPLE_RATE
        self._volume = MAX_VOLUME
        self.set_sample_rate(sample_rate)
        self.set_volume(volume)

    # -- settings ---------------------------------------------------------

    def set_sample_rate(self, sample_rate: int) -> int:
        with self._guard.exclusive(), self._lock:
            self._sample_rate = max(min(int(sample_rate), MAX_SAMPLE_RATE), MIN_SAMPLE_RATE)
            self._clear_cache()
            return self._sample_rate

    def get_sample_rate(self) -> int:
        return self._sample_rate

    def set_volume(self, volume: float) -> int:
        """Set volume from 0.0..1.0; returns the internal 16-bit peak."""
        try:
            v = float(volume)
        except (TypeError, ValueError):
            v = 0.0
        if v != v:
            v = 0.0
        with self._guard.exclusive(), self._lock:
            self._volume = int(round(max(0.0, min(1.0, v)) * MAX_VOLUME))
            self._clear_cache()
            return self._volume

    def get_volume(self) -> float:
        return round(self._volume / MAX_VOLUME, 4)

    def debug(self) -> None:
        """Log per-note generation timings at DEBUG level."""
        self._debug = True

    @contextmanager
    def session(self) -> Iterator[int]:
        """Hold the current settings for a batch of renders.

        Yields the sample rate every render inside the block will use.
        """
        with self._guard.shared():
            yield self._sample_rate

    # -- registry ---------------------------------------------------------

    def load_sound_profile(self, *profiles: SoundProfile) -> None:
        with self._lock:
            for p in profiles:
                self._registry.register(p)

    def load_modulation_function(self, *functions: ModulationFunction) -> None:
        for fn in functions:
            if not callable(fn):
                raise TypeError("Invalid modulation function.")
        with self._lock:
            self._modulations.extend(functions)

    def list_sounds(self) -> list[str]:
        return self._registry.names()

    def create_instrument(self, sound: str | int) -> Instrument:
        idx = self._registry.index_of(sound)
        return Instrument(self, self._registry.get(idx).name, idx)

    # -- cache ------------------------------------------------------------

    def _clear_cache(self) -> None:
        self._cache = {}
        self._key_locks = {}

    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def cached(self, sound: str | int, note: str, octave: int, duration: float) -> bytes | None:
        key = (self._registry.index_of(sound), clamp_octave(octave), note, float(duration or DEFAULT_DURATION))
        with self._lock:
            return self._cache.get(key)

    # -- rendering --------------------------------------------------------

    def render(self, sound: str | int, note: str, octave: int, duration: float | None = None) -> bytes:
        """Render one note to a mono 16-bit WAV buffer.

        ``octave`` is clamped to 1..8 and a falsy ``duration`` means 2 seconds.
        Raises InvalidSound for an unknown instrument and InvalidNote for an
        unknown pitch class; neither touches the cache.
        """
        with self._guard.shared():
            return self._render(sound, note, octave, duration)

    def _render(self, sound: str | int, note: str, octave: int, duration: float | None) -> bytes:
        idx = self._registry.find(sound)
        if idx == -1:
            raise InvalidSound(f"Invalid sound or sound ID: {sound}")
        profile = self._registry.get(idx)

        t0 = time.perf_counter()
        o = clamp_octave(octave)
        d = float(duration) if duration else DEFAULT_DURATION
        frequency = note_frequency(note, o)
        key: CacheKey = (idx, o, note, d)

        with self._lock:
            hit = self._cache.get(key)
            if hit is None:
                key_lock = self._key_locks.setdefault(key, threading.Lock())
        if hit is not None:
            self._log_timing("Retrieve from cache: %dms", t0)
            return hit

        with key_lock:
            with self._lock:
                hit = self._cache.get(key)
                sample_rate = self._sample_rate
                volume = self._volume
                modulations = tuple(self._modulations)
            if hit is not None:
                self._log_timing("Retrieve from cache: %dms", t0)
                return hit

            rng = Random(f"{self._seed}:{idx}:{o}:{note}:{d}:{sample_rate}")
            pcm = self._synthesize(profile, frequency, d, sample_rate, volume, modulations, rng)
            wav = wrap_pcm(pcm, sample_rate=sample_rate, channels=self.channels, bits_per_sample=self.bits_per_sample)

            with self._lock:
                self._cache[key] = wav
                self._key_locks.pop(key, None)
        self._log_timing("Generated in %dms", t0)
        return wav

    def _synthesize(
        self,
        profile: SoundProfile,
        frequency: float,
        duration: float,
        sample_rate: int,
        volume: int,
        modulations: tuple[ModulationFunction, ...],
        rng: Random,
    ) -> bytes:
        attack = float(profile.attack(sample_rate, frequency, volume))
        dampen = float(profile.dampen(sample_rate, frequency, volume))
        ctx = WaveContext(
            modulate=modulations,
            state=profile.new_state() if profile.new_state is not None else None,
            rng=rng,
        )
        wave = profile.wave

        decay_len = max(0, int(sample_rate * duration))
        attack_len = min(max(0, int(sample_rate * attack)), decay_len)

        samples = [0] * decay_len
        attack_span = sample_rate * attack
        for i in range(attack_len):
            samples[i] = _clip16(volume * (i / attack_span) * wave(ctx, i, sample_rate, frequency, volume))

        decay_span = sample_rate * (duration - attack)
        for i in range(attack_len, decay_len):
            env = max(0.0, 1.0 - (i - attack_len) / decay_span) ** dampen
            samples[i] = _clip16(volume * env * wave(ctx, i, sample_rate, frequency, volume))

        return pack_samples(samples)

    def _log_timing(self, fmt: str, t0: float) -> None:
        if self._debug:
            logger.debug(fmt, int((time.perf_counter() - t0) * 1000))
