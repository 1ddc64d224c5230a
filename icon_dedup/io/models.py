"""Data models shared across the icon deduplication pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(slots=True)
class ClusterDecision:
    """Keep/remove outcome for one cluster of equivalent styles."""

    keep: str
    remove: List[str] = field(default_factory=list)

    @property
    def members(self) -> List[str]:
        return [self.keep, *self.remove]


@dataclass(slots=True)
class IconDecision:
    """All cluster decisions recorded for one icon name."""

    icon_name: str
    clusters: List[ClusterDecision] = field(default_factory=list)

    @property
    def keep(self) -> List[str]:
        return [cluster.keep for cluster in self.clusters]

    @property
    def remove(self) -> List[str]:
        removed: List[str] = []
        for cluster in self.clusters:
            removed.extend(cluster.remove)
        return removed


@dataclass(slots=True)
class DedupStats:
    """Aggregate figures derived from a finished set of decisions."""

    total_icons: int
    icons_with_duplicates: int
    files_to_remove: int
    removed_per_style: Dict[str, int] = field(default_factory=dict)
