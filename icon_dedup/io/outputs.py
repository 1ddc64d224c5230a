"""Report serialization, statistics and console summaries."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

import pandas as pd

from .models import DedupStats, IconDecision

logger = logging.getLogger(__name__)

DEFAULT_EXACT_REPORT = Path("dedup-report.json")
DEFAULT_VISUAL_REPORT = Path("visual-dedup-report.json")

LAYOUT_MERGED = "merged"
LAYOUT_PER_CLUSTER = "per-cluster"
REPORT_LAYOUTS = (LAYOUT_MERGED, LAYOUT_PER_CLUSTER)

PLAN_COLUMNS = ["icon", "style", "action", "path"]


def exact_report_payload(
    decisions: Mapping[str, IconDecision], layout: str = LAYOUT_MERGED
) -> Dict[str, Any]:
    """Return the JSON-ready exact duplicate report.

    ``merged`` stores one ``{"keep": [...], "remove": [...]}`` object per icon;
    ``per-cluster`` stores a list of ``{"keep": style, "remove": [...]}``.
    """
    if layout not in REPORT_LAYOUTS:
        raise ValueError(f"Unknown report layout: {layout!r}")
    payload: Dict[str, Any] = {}
    for icon_name in sorted(decisions):
        decision = decisions[icon_name]
        if layout == LAYOUT_MERGED:
            payload[icon_name] = {"keep": decision.keep, "remove": decision.remove}
        else:
            payload[icon_name] = [
                {"keep": cluster.keep, "remove": list(cluster.remove)}
                for cluster in decision.clusters
            ]
    return payload


def visual_report_payload(decisions: Mapping[str, IconDecision]) -> Dict[str, Any]:
    """Return the JSON-ready visual duplicate report (one object per single-cluster icon)."""
    payload: Dict[str, Any] = {}
    for icon_name in sorted(decisions):
        clusters = [
            {"keep": cluster.keep, "remove": list(cluster.remove)}
            for cluster in decisions[icon_name].clusters
        ]
        payload[icon_name] = clusters[0] if len(clusters) == 1 else clusters
    return payload


def write_report(path: Path, payload: Mapping[str, Any]) -> Path:
    """Write *payload* to *path* as JSON and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.debug("Wrote %d report entries to %s", len(payload), path)
    return path


def compute_stats(
    decisions: Mapping[str, IconDecision],
    total_icons: int,
    styles: Sequence[str] = (),
) -> DedupStats:
    """Aggregate removal figures from finished *decisions*."""
    removed_per_style: Dict[str, int] = {style: 0 for style in styles}
    files_to_remove = 0
    for decision in decisions.values():
        for style in decision.remove:
            removed_per_style[style] = removed_per_style.get(style, 0) + 1
            files_to_remove += 1
    return DedupStats(
        total_icons=int(total_icons),
        icons_with_duplicates=sum(1 for decision in decisions.values() if decision.clusters),
        files_to_remove=files_to_remove,
        removed_per_style=removed_per_style,
    )


def write_stats(path: Path, stats: DedupStats) -> Path:
    """Write *stats* to *path* as JSON and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(stats), indent=2) + "\n", encoding="utf-8")
    return path


def print_summary(stats: DedupStats, report_path: Path | None = None, title: str = "Deduplication") -> None:
    """Print the run statistics to stdout."""
    print(f"\n======= {title} summary =======")
    print(f"Icon names checked: {stats.total_icons}")
    print(f"Icons with duplicates: {stats.icons_with_duplicates}")
    print(f"Files marked for removal: {stats.files_to_remove}")
    for style, count in stats.removed_per_style.items():
        print(f"  {style}: {count}")
    if report_path is not None:
        print(f"[report] saved to {report_path}")


def plan_rows(
    decisions: Mapping[str, IconDecision],
    groups: Mapping[str, Mapping[str, Path]],
) -> list[dict[str, Any]]:
    """Flatten *decisions* into one row per kept or removed variant."""
    rows: list[dict[str, Any]] = []
    for icon_name in sorted(decisions):
        variants = groups.get(icon_name, {})
        for cluster in decisions[icon_name].clusters:
            for action, styles in (("keep", [cluster.keep]), ("remove", cluster.remove)):
                for style in styles:
                    path = variants.get(style)
                    rows.append(
                        {
                            "icon": icon_name,
                            "style": style,
                            "action": action,
                            "path": str(path) if path else None,
                        }
                    )
    return rows


def write_plan_table(
    path: Path,
    decisions: Mapping[str, IconDecision],
    groups: Mapping[str, Mapping[str, Path]],
) -> Path:
    """Write the flattened removal plan as CSV (``.csv``) or Parquet."""
    df = pd.DataFrame(plan_rows(decisions, groups), columns=PLAN_COLUMNS)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".csv":
        df.to_csv(path, index=False)
    else:
        df.to_parquet(path, index=False, engine="pyarrow")
    print(f"[plan] wrote {len(df)} rows to {path}")
    return path
