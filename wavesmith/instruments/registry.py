from __future__ import annotations

from typing import Iterable, List

from wavesmith.errors import InvalidSound
from wavesmith.instruments.acoustic import ACOUSTIC
from wavesmith.instruments.base import SoundProfile
from wavesmith.instruments.edm import EDM
from wavesmith.instruments.organ import ORGAN
from wavesmith.instruments.piano import PIANO


class SoundRegistry:
    """Ordered, append-only table of sound profiles.

    Profiles are addressed by name or by their insertion index; indices never
    change because nothing is ever removed.
    """

    def __init__(self, profiles: Iterable[SoundProfile] = ()) -> None:
        self._profiles: List[SoundProfile] = []
        self._by_name: dict[str, int] = {}
        for p in profiles:
            self.register(p)

    def register(self, profile: SoundProfile) -> int:
        if not isinstance(profile, SoundProfile):
            raise TypeError("Invalid sound profile.")
        if profile.name in self._by_name:
            raise ValueError(f"sound profile already registered: {profile.name}")
        self._profiles.append(profile)
        self._by_name[profile.name] = len(self._profiles) - 1
        return len(self._profiles) - 1

    def find(self, sound: str | int) -> int:
        """Index of ``sound`` (name or index), or -1."""
        if isinstance(sound, str):
            return self._by_name.get(sound.strip(), -1)
        if isinstance(sound, int) and not isinstance(sound, bool) and 0 <= sound < len(self._profiles):
            return sound
        return -1

    def index_of(self, sound: str | int) -> int:
        idx = self.find(sound)
        if idx == -1:
            raise InvalidSound(f"Invalid sound or sound ID: {sound}")
        return idx

    def get(self, sound: str | int) -> SoundProfile:
        return self._profiles[self.index_of(sound)]

    def names(self) -> list[str]:
        return [p.name for p in self._profiles]

    def __len__(self) -> int:
        return len(self._profiles)


def default_profiles() -> list[SoundProfile]:
    return [PIANO, ORGAN, ACOUSTIC, EDM]


def default_registry() -> SoundRegistry:
    return SoundRegistry(default_profiles())
