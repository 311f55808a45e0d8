from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageSelection:
    """Photo picked for the current compose session.

    Attributes:
        encoded_bytes: Base64 text of the raw image bytes.
        mime_type: MIME type reported for the upload (e.g., image/jpeg).
        preview_reference: Displayable data URI built from the same bytes.
    """

    encoded_bytes: str
    mime_type: str
    preview_reference: str
