"""Thumbnail generator service.

Small wrapper around Pillow that shrinks artifact images for the assistant's
context gallery. Input is raw image bytes; output is PNG bytes fitting within
`max_size` with the aspect ratio preserved.

Example:
    tg = ThumbnailGenerator(max_size=(256, 256))
    png = tg.create_thumbnail(raw_bytes)
"""
from __future__ import annotations

import io
from typing import Tuple

from PIL import Image


class ThumbnailGenerator:
    """Generate PNG thumbnails from image bytes.

    Args:
        max_size: Maximum width and height for the thumbnail. Defaults to (256, 256).
        background: Colour used to flatten transparent pixels. Defaults to white.
    """

    def __init__(self, max_size: Tuple[int, int] = (256, 256), background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or (255, 255, 255)

    def create_thumbnail(self, data: bytes) -> bytes:
        """Return a PNG thumbnail of `data`.

        Raises:
            ValueError: If `data` cannot be opened as an image.
        """
        try:
            src = Image.open(io.BytesIO(data))
            src.load()
        except Exception as exc:
            raise ValueError("Artifact bytes are not a supported image format") from exc

        src = src.convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        flattened = Image.new("RGB", src.size, self.background)
        flattened.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        flattened.save(out_io, format="PNG", optimize=True)
        return out_io.getvalue()
