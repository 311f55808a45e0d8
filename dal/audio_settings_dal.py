"""Persistence for the ambient music volume and mute flag."""

from __future__ import annotations

import logging

from dal.key_value_dal import KeyValueDAL
from models.audio_settings import DEFAULT_VOLUME, AudioSettings
from utils.database_init import AsyncDatabaseInitializer

LOGGER = logging.getLogger(__name__)
VOLUME_KEY = "lumina_volume"
MUTED_KEY = "lumina_muted"


class AudioSettingsDAL:
    """Read and write AudioSettings as two independent scalar keys."""

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def load(self) -> AudioSettings:
        """Return stored settings, falling back to defaults for missing or unreadable values."""
        async with self._db.connection() as conn:
            raw_volume = await KeyValueDAL.read(conn, VOLUME_KEY)
            raw_muted = await KeyValueDAL.read(conn, MUTED_KEY)

        volume = DEFAULT_VOLUME
        if raw_volume is not None:
            try:
                volume = min(1.0, max(0.0, float(raw_volume)))
            except ValueError:
                LOGGER.warning("Ignoring unreadable stored volume %r", raw_volume)

        return AudioSettings(volume=volume, muted=raw_muted == "true")

    async def save(self, settings: AudioSettings) -> None:
        async with self._db.connection() as conn:
            await KeyValueDAL.write(conn, VOLUME_KEY, repr(float(settings.volume)))
            await KeyValueDAL.write(conn, MUTED_KEY, "true" if settings.muted else "false")
            await conn.commit()
