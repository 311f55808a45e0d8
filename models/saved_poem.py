"""Persisted library record schema.

Records are stored with camelCase keys inside a versioned envelope::

    {"schemaVersion": 1, "poems": [{"id": ..., "poem": ..., "createdAt": ...}, ...]}

Earlier builds wrote a bare JSON array using `image` and `date` for the
preview and timestamp; `upgrade_legacy_record` maps those onto the current
field names so old libraries keep loading.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LIBRARY_SCHEMA_VERSION = 1


class SavedPoemRecord(BaseModel):
    """A poem saved to the library. Immutable once created."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    title: Optional[str] = None
    poem: str = Field(min_length=1)
    inspiration: Optional[str] = None
    image_preview: Optional[str] = Field(default=None, alias="imagePreview")
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_storage(self) -> Dict[str, Any]:
        """Return the JSON-ready dict written to the key-value store."""
        return self.model_dump(mode="json", by_alias=True)


def upgrade_legacy_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Rename legacy `image`/`date` keys to `imagePreview`/`createdAt`."""
    upgraded = dict(raw)
    if "imagePreview" not in upgraded and "image" in upgraded:
        upgraded["imagePreview"] = upgraded.pop("image")
    if "createdAt" not in upgraded and "date" in upgraded:
        upgraded["createdAt"] = upgraded.pop("date")
    return upgraded
