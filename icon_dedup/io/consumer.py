"""Read deduplication reports and delete the variants they mark."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from .models import ClusterDecision

logger = logging.getLogger(__name__)

Report = Dict[str, List[ClusterDecision]]


class ReportFormatError(ValueError):
    """Raised when a report does not have the expected structure."""


def parse_report(raw: Any) -> Report:
    """Normalize either report shape into ``{icon: [ClusterDecision, ...]}``.

    Entries may be a single ``{"keep", "remove"}`` object or a list of them,
    and ``keep`` may be a style or a list of styles.
    """
    if not isinstance(raw, dict):
        raise ReportFormatError("Report root must be a JSON object")
    report: Report = {}
    for icon_name, entry in raw.items():
        entries = entry if isinstance(entry, list) else [entry]
        clusters: List[ClusterDecision] = []
        for item in entries:
            if not isinstance(item, dict):
                raise ReportFormatError(f"{icon_name}: entry must be an object")
            remove = item.get("remove") or []
            if not isinstance(remove, list) or not all(isinstance(s, str) for s in remove):
                raise ReportFormatError(f"{icon_name}: 'remove' must be a list of styles")
            keep = item.get("keep")
            keepers = keep if isinstance(keep, list) else [keep]
            if not keepers or not all(isinstance(s, str) for s in keepers):
                raise ReportFormatError(f"{icon_name}: 'keep' must be a style or list of styles")
            # merged entries carry several keepers; the first one anchors the removals
            clusters.append(ClusterDecision(keep=keepers[0], remove=list(remove)))
            for extra in keepers[1:]:
                clusters.append(ClusterDecision(keep=extra, remove=[]))
        report[icon_name] = clusters
    return report


def load_report(path: Path) -> Report:
    """Read and normalize the report stored at *path*."""
    if not path.exists():
        raise FileNotFoundError(f"Report does not exist: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ReportFormatError(f"{path} is not valid JSON: {exc}") from exc
    return parse_report(raw)


def removals(report: Mapping[str, Sequence[ClusterDecision]]) -> Dict[str, List[str]]:
    """Return ``{icon: [style, ...]}`` of every style marked for removal."""
    marked: Dict[str, List[str]] = {}
    for icon_name, clusters in report.items():
        styles: List[str] = []
        for cluster in clusters:
            styles.extend(style for style in cluster.remove if style not in styles)
        marked[icon_name] = styles
    return marked


def delete_marked(
    report: Mapping[str, Sequence[ClusterDecision]],
    icon_dir: Path,
    extension: str = ".svg",
    dry_run: bool = False,
) -> List[Path]:
    """Delete ``<icon_dir>/<style>/<icon><extension>`` for every removal.

    Files that are already gone are skipped. Returns the deleted paths, or
    the paths that would be deleted when *dry_run* is set.
    """
    suffix = extension if extension.startswith(".") else f".{extension}"
    deleted: List[Path] = []
    for icon_name, styles in removals(report).items():
        for style in styles:
            target = icon_dir / style / f"{icon_name}{suffix}"
            if not target.is_file():
                logger.debug("Already absent: %s", target)
                continue
            if dry_run:
                print(f"[dry-run] would delete {target}")
            else:
                target.unlink()
                print(f"[deleted] {target}")
            deleted.append(target)
    return deleted
