from __future__ import annotations

from dataclasses import dataclass

DEFAULT_VOLUME = 0.4


@dataclass
class AudioSettings:
    """Ambient music preferences persisted across sessions.

    Attributes:
        volume: Playback level in [0, 1], kept while muted.
        muted: When True the effective volume is forced to zero.
    """

    volume: float = DEFAULT_VOLUME
    muted: bool = False

    @property
    def effective_volume(self) -> float:
        return 0.0 if self.muted else self.volume

    def set_volume(self, volume: float) -> None:
        """Clamp and apply a new volume; a non-zero level unmutes."""
        self.volume = min(1.0, max(0.0, float(volume)))
        if self.volume > 0:
            self.muted = False

    def toggle_mute(self) -> None:
        self.muted = not self.muted
