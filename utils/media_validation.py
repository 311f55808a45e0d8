"""Validation helpers for uploaded photos."""

import base64
import mimetypes
from typing import Optional

from fastapi import HTTPException, UploadFile

from models.image_selection import ImageSelection


def resolve_image_mime_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """Return the image MIME type for an upload.

    The declared content type wins. When it is missing, or is a generic
    binary type, the filename extension is used instead. Anything that is
    not `image/*` is rejected with 415.
    """
    mime_type = (content_type or "").lower().split(";", 1)[0].strip()
    if not mime_type or mime_type == "application/octet-stream":
        guessed, _ = mimetypes.guess_type(filename or "")
        mime_type = (guessed or "").lower()

    if not mime_type.startswith("image/"):
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported or missing image content type: {content_type or 'unknown'}",
        )
    return mime_type


def build_image_selection(raw: bytes, mime_type: str) -> ImageSelection:
    """Encode raw image bytes as base64 text plus a data URI preview."""
    encoded = base64.b64encode(raw).decode("ascii")
    return ImageSelection(
        encoded_bytes=encoded,
        mime_type=mime_type,
        preview_reference=f"data:{mime_type};base64,{encoded}",
    )


async def read_image_selection(image_file: UploadFile) -> ImageSelection:
    """Read a validated photo upload, ensuring it is not empty."""
    mime_type = resolve_image_mime_type(image_file.content_type, image_file.filename)
    raw = await image_file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Uploaded image is empty.")
    return build_image_selection(raw, mime_type)
