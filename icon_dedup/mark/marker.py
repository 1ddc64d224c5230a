"""Marking rules for flagging duplicate variants inside a design library.

The design tool exports component sets as ``{"name": ..., "variants": [...]}``
where each variant is named like ``Style=Outlined``. A variant is flagged when
the report lists its style for removal, and two-tone variants are flagged
unconditionally because that style is retired everywhere.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence

from ..io.consumer import Report, removals

logger = logging.getLogger(__name__)

TWO_TONE_STYLE = "twotone"
WARNING_MARK = "⚠️"

REASON_TWO_TONE = "two-tone style is always removed"
REASON_REPORT = "listed for removal in report"

_STYLE_PATTERN = re.compile(r"Style=(.+)")
_NAME_STRIP = re.compile(r"[^a-z0-9_]")
_STYLE_STRIP = re.compile(r"[^a-z0-9]")


@dataclass(slots=True)
class MarkedVariant:
    component: str
    variant: str
    style: str
    reason: str
    marked_name: str


def normalize_name(name: str) -> str:
    """Return the report key for a component set name."""
    return _NAME_STRIP.sub("", name.lower().replace(WARNING_MARK, ""))


def extract_style(variant_name: str) -> str:
    match = _STYLE_PATTERN.search(variant_name)
    value = match.group(1) if match else variant_name
    return _STYLE_STRIP.sub("", value.lower())


def flagged_name(variant_name: str) -> str:
    """Append the warning mark to *variant_name* once."""
    if WARNING_MARK in variant_name:
        return variant_name
    return f"{variant_name} {WARNING_MARK}"


def mark_reason(style: str, removed_styles: Iterable[str]) -> str | None:
    """Return why a variant of *style* must be flagged, or None to keep it."""
    if style == TWO_TONE_STYLE:
        return REASON_TWO_TONE
    if style in {s.lower() for s in removed_styles}:
        return REASON_REPORT
    return None


def mark_components(components: Sequence[Mapping[str, Any]], report: Report) -> List[MarkedVariant]:
    """Return every variant of *components* that should be flagged for deletion."""
    marked_styles = removals(report)
    marked: List[MarkedVariant] = []
    for component in components:
        component_name = str(component.get("name", ""))
        icon_name = normalize_name(component_name)
        for variant_name in component.get("variants", []):
            style = extract_style(str(variant_name))
            reason = mark_reason(style, marked_styles.get(icon_name, []))
            if reason is None:
                logger.debug("Keeping %s / %s", component_name, variant_name)
                continue
            marked.append(
                MarkedVariant(
                    component=component_name,
                    variant=str(variant_name),
                    style=style,
                    reason=reason,
                    marked_name=flagged_name(str(variant_name)),
                )
            )
    return marked


def load_components(path: Path) -> list[dict[str, Any]]:
    """Read a component-set export; accepts a list or ``{"components": [...]}``."""
    if not path.exists():
        raise FileNotFoundError(f"Component export does not exist: {path}")
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("components", [])
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of component sets")
    return [item for item in raw if isinstance(item, dict)]
