"""Async Data Access Layer for the saved poem library.

The whole library is a single JSON document stored under `LIBRARY_KEY` in
the KEY_VALUE table. Writes are read-modify-write inside one
`BEGIN IMMEDIATE` transaction, so concurrent writers queue instead of
overwriting each other.
Unreadable documents degrade to an empty library instead of raising.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

import aiosqlite
from pydantic import ValidationError

from dal.key_value_dal import KeyValueDAL
from models.saved_poem import LIBRARY_SCHEMA_VERSION, SavedPoemRecord, upgrade_legacy_record
from utils.database_init import AsyncDatabaseInitializer

LOGGER = logging.getLogger(__name__)
LIBRARY_KEY = "lumina_verse_library"


def sort_newest_first(records: Iterable[SavedPoemRecord]) -> List[SavedPoemRecord]:
    """Order records by creation time descending, id breaking ties."""
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


class PoemLibraryDAL:
    """Data access layer for SavedPoemRecord collections."""

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def list_saved_poems(self) -> List[SavedPoemRecord]:
        """Return every saved poem, newest first."""
        async with self._db.connection() as conn:
            records = await self._load(conn)
        return sort_newest_first(records)

    async def get_poem(self, poem_id: int) -> Optional[SavedPoemRecord]:
        """Return the record with `poem_id`, or None if not found."""
        async with self._db.connection() as conn:
            records = await self._load(conn)
        return next((r for r in records if r.id == poem_id), None)

    async def save_poem(self, record: SavedPoemRecord) -> SavedPoemRecord:
        """Prepend `record` to the stored collection and write it back."""
        async with self._db.write_transaction() as conn:
            records = await self._load(conn)
            await self._store(conn, [record, *records])
        return record

    async def create_poem(
        self,
        poem: str,
        *,
        title: Optional[str] = None,
        inspiration: Optional[str] = None,
        image_preview: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SavedPoemRecord:
        """Build a new record with a unique id and persist it.

        Args:
            poem: Poem body; must contain non-whitespace text.
            title: Optional title; blank titles are stored as absent.
            inspiration: Optional inspiration text shown alongside the poem.
            image_preview: Optional data URI of the photo preview.
            now: Creation time override, defaults to the current UTC time.

        Returns:
            The persisted SavedPoemRecord.

        Raises:
            ValueError: If the poem is empty.
        """
        if not poem or not poem.strip():
            raise ValueError("A poem is required before saving.")

        created_at = now or datetime.now(timezone.utc)
        async with self._db.write_transaction() as conn:
            records = await self._load(conn)
            record = SavedPoemRecord(
                id=self._next_id(created_at, records),
                title=(title or "").strip() or None,
                poem=poem,
                inspiration=inspiration or None,
                image_preview=image_preview,
                created_at=created_at,
            )
            await self._store(conn, [record, *records])

        LOGGER.info("Saved poem %s to library (%d total)", record.id, len(records) + 1)
        return record

    async def delete_poem(self, poem_id: int) -> bool:
        """Remove the record with `poem_id`. Returns False when it does not exist."""
        async with self._db.write_transaction() as conn:
            records = await self._load(conn)
            remaining = [r for r in records if r.id != poem_id]
            if len(remaining) == len(records):
                return False
            await self._store(conn, remaining)
        return True

    @staticmethod
    def _next_id(created_at: datetime, records: List[SavedPoemRecord]) -> int:
        """Return the creation time in epoch milliseconds, bumped past any existing id."""
        taken = {r.id for r in records}
        candidate = int(created_at.timestamp() * 1000)
        while candidate in taken:
            candidate += 1
        return candidate

    @staticmethod
    async def _load(conn: aiosqlite.Connection) -> List[SavedPoemRecord]:
        """Read the stored collection in storage order."""
        raw = await KeyValueDAL.read(conn, LIBRARY_KEY)
        if raw is None:
            return []

        try:
            document: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Library document is not valid JSON, treating as empty: %s", exc)
            return []

        if isinstance(document, list):
            items = [upgrade_legacy_record(item) if isinstance(item, dict) else item for item in document]
        elif (
            isinstance(document, dict)
            and document.get("schemaVersion") == LIBRARY_SCHEMA_VERSION
            and isinstance(document.get("poems"), list)
        ):
            items = document["poems"]
        else:
            LOGGER.warning("Unrecognised library document shape, treating as empty.")
            return []

        records: List[SavedPoemRecord] = []
        for item in items:
            try:
                records.append(SavedPoemRecord.model_validate(item))
            except ValidationError as exc:
                LOGGER.warning("Skipping invalid library record: %s", exc)
        return records

    @staticmethod
    async def _store(conn: aiosqlite.Connection, records: List[SavedPoemRecord]) -> None:
        document = {
            "schemaVersion": LIBRARY_SCHEMA_VERSION,
            "poems": [r.to_storage() for r in records],
        }
        await KeyValueDAL.write(conn, LIBRARY_KEY, json.dumps(document))
