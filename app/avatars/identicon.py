"""Identicon avatars.

An identicon is a 5x5 grid mirrored around its vertical axis, so only the left
three columns are derived from the seed. The SHA-256 digest of the seed decides
both which cells are filled and the foreground hue, which makes the output a
pure function of ``(seed, size)``.
"""

from __future__ import annotations

import colorsys
import hashlib
import io
import time

from PIL import Image, ImageDraw

GRID = 5
BACKGROUND = (240, 240, 240)


def avatar_seed(name: str, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{name}{now_ms}"


def _foreground(digest: bytes) -> tuple[int, int, int]:
    hue = int.from_bytes(digest[-2:], "big") / 0xFFFF
    r, g, b = colorsys.hls_to_rgb(hue, 0.5, 0.6)
    return int(r * 255), int(g * 255), int(b * 255)


def _cells(digest: bytes) -> list[tuple[int, int]]:
    filled: list[tuple[int, int]] = []
    half = (GRID + 1) // 2
    for col in range(half):
        for row in range(GRID):
            if digest[col * GRID + row] % 2 == 0:
                filled.append((col, row))
                if col != GRID - 1 - col:
                    filled.append((GRID - 1 - col, row))
    return filled


def generate_identicon(seed: str, size: int = 200) -> bytes:
    """Render a PNG identicon for ``seed`` and return the encoded bytes."""
    if size < GRID * 2:
        raise ValueError(f"avatar size too small: {size}")

    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    padding = size // 10
    cell = (size - 2 * padding) // GRID
    offset = (size - cell * GRID) // 2

    image = Image.new("RGB", (size, size), BACKGROUND)
    draw = ImageDraw.Draw(image)
    color = _foreground(digest)
    for col, row in _cells(digest):
        x0 = offset + col * cell
        y0 = offset + row * cell
        draw.rectangle((x0, y0, x0 + cell - 1, y0 + cell - 1), fill=color)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
