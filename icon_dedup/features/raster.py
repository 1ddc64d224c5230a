"""Rasterize icon sources into fixed-size bitmaps for visual comparison."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

try:  # pragma: no cover - depends on the system cairo library
    import cairosvg  # type: ignore
except (ImportError, OSError):  # pragma: no cover - depends on the system cairo library
    cairosvg = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

BITMAP_SIZE = 64
SVG_SUFFIX = ".svg"

_UTF8_BOM = b"\xef\xbb\xbf"
_SVG_PROLOGS = (b"<?xml", b"<!--", b"<!doctype")


class RasterizationError(Exception):
    """Raised when an icon source cannot be rendered to a bitmap."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot rasterize {source}: {reason}")
        self.source = source


def render_bitmap(
    source_bytes: bytes,
    size: int = BITMAP_SIZE,
    label: str = "<bytes>",
    svg_hint: bool = False,
) -> Image.Image:
    """Return *source_bytes* rendered as a size-by-size RGBA Pillow image.

    SVG input is rasterized with cairosvg when *svg_hint* is set or the bytes
    look like SVG markup; anything else is opened with Pillow.
    """
    if size <= 0:
        raise ValueError("Size must be a positive integer")
    if not source_bytes:
        raise RasterizationError(label, "empty source")

    data = source_bytes
    if svg_hint or _looks_like_svg(source_bytes):
        if cairosvg is None:
            raise RasterizationError(label, "cairosvg is not available")
        try:
            data = cairosvg.svg2png(  # type: ignore[attr-defined]
                bytestring=source_bytes, output_width=size, output_height=size
            )
        except Exception as exc:  # noqa: BLE001 - cairosvg raises many parser errors
            raise RasterizationError(label, str(exc) or type(exc).__name__) from exc

    try:
        with Image.open(BytesIO(data)) as img:
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise RasterizationError(label, str(exc) or type(exc).__name__) from exc

    if rgba.size != (size, size):
        resized = rgba.resize((size, size), Image.Resampling.LANCZOS)
        rgba.close()
        rgba = resized
    return rgba


def rasterize_file(source: str | Path, target: str | Path, size: int = BITMAP_SIZE) -> Path:
    """Render the icon at *source* into a PNG at *target* and return *target*."""
    source_path = Path(source)
    target_path = Path(target)
    try:
        source_bytes = source_path.read_bytes()
    except OSError as exc:
        raise RasterizationError(str(source_path), exc.strerror or str(exc)) from exc

    bitmap = render_bitmap(
        source_bytes,
        size=size,
        label=str(source_path),
        svg_hint=source_path.suffix.lower() == SVG_SUFFIX,
    )
    try:
        target_path.parent.mkdir(parents=True, exist_ok=True)
        bitmap.save(target_path, format="PNG")
    finally:
        bitmap.close()
    logger.debug("Rasterized %s -> %s", source_path, target_path)
    return target_path


def _looks_like_svg(source_bytes: bytes) -> bool:
    head = source_bytes.lstrip()
    if head.startswith(_UTF8_BOM):
        head = head[len(_UTF8_BOM):].lstrip()
    head = head.lower()
    if head.startswith(b"<svg"):
        return True
    # XML declaration, comments and DOCTYPE may precede the root element
    return head.startswith(_SVG_PROLOGS) and b"<svg" in head
