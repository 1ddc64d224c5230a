"""Scan style directories and group icon files by logical name."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Sequence

logger = logging.getLogger(__name__)

DEFAULT_ICON_DIR = Path("src") / "svg"
DEFAULT_STYLES: tuple[str, ...] = ("outlined", "filled", "sharp", "round")
DEFAULT_EXTENSION = ".svg"

IconGroups = Dict[str, Dict[str, Path]]


def normalize_extension(extension: str) -> str:
    """Return *extension* with a single leading dot."""
    cleaned = extension.strip()
    if not cleaned:
        raise ValueError("Extension must not be empty")
    return cleaned if cleaned.startswith(".") else f".{cleaned}"


def group_icons_by_name(
    icon_dir: str | Path,
    styles: Sequence[str] = DEFAULT_STYLES,
    extension: str = DEFAULT_EXTENSION,
) -> IconGroups:
    """Return ``{icon_name: {style: path}}`` for every style directory under *icon_dir*.

    Icon names are keyed in sorted order and each inner mapping follows the
    order of *styles*, so the result does not depend on how the filesystem
    lists its entries. Style directories that do not exist are skipped.
    """
    root = Path(icon_dir)
    suffix = normalize_extension(extension)
    collected: dict[str, dict[str, Path]] = {}

    for style in styles:
        style_dir = root / style
        if not style_dir.is_dir():
            logger.debug("Skipping missing style directory %s", style_dir)
            continue
        count = 0
        for entry in sorted(style_dir.iterdir(), key=lambda item: item.name):
            if not entry.name.endswith(suffix) or not entry.is_file():
                continue
            icon_name = entry.name[: -len(suffix)]
            if not icon_name:
                continue
            collected.setdefault(icon_name, {})[style] = entry.absolute()
            count += 1
        logger.debug("Found %d %s files in %s", count, suffix, style_dir)

    return {name: collected[name] for name in sorted(collected)}
