"""Library preview generator.

Provides a small OOP wrapper around Pillow that shrinks an uploaded photo
into the preview stored with a saved poem. The preview fits within
`max_size` (320x320 by default), is flattened onto an opaque background,
and is returned as a PNG data URI ready to drop into an <img> tag.

Public class: `ThumbnailGenerator`

Example:
    tg = ThumbnailGenerator(max_size=(320, 320))
    preview = tg.create_preview_data_uri(image.encoded_bytes)
"""
from __future__ import annotations

import base64
import io
from typing import Tuple

from PIL import Image


class ThumbnailGenerator:
    """Generate PNG preview data URIs from base64 image text.

    Args:
        max_size: Maximum width and height for the preview. Defaults to (320, 320).
        background: Optional background color used when flattening images with alpha.
            If None, images with alpha are flattened against white.
    """

    def __init__(self, max_size: Tuple[int, int] = (320, 320), background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or (255, 255, 255)

    def create_preview_data_uri(self, data: str | bytes) -> str:
        """Create a preview from base64-encoded image data.

        Args:
            data: Base64-encoded image data (either `str` or `bytes`).

        Returns:
            A `data:image/png;base64,...` string.

        Raises:
            ValueError: If the provided data cannot be decoded or opened as an image.
        """
        data_bytes = data.encode("utf-8") if isinstance(data, str) else data

        try:
            raw = base64.b64decode(data_bytes, validate=True)
        except Exception as exc:
            raise ValueError("Invalid base64 data provided") from exc

        try:
            src = Image.open(io.BytesIO(raw))
            src.load()
        except Exception as exc:
            raise ValueError("Decoded bytes are not a supported image format") from exc

        src = src.convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        background = Image.new("RGB", src.size, self.background)
        background.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        background.save(out_io, format="PNG", optimize=True)
        encoded = base64.b64encode(out_io.getvalue()).decode("utf-8")
        return f"data:image/png;base64,{encoded}"
