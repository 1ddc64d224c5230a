"""Keeper selection shared by the exact and visual resolvers."""

from __future__ import annotations

from typing import Sequence

from ..io.models import ClusterDecision

PREFERRED_STYLE = "outlined"


def choose_keeper(cluster: Sequence[str], preferred: str = PREFERRED_STYLE) -> str:
    """Return *preferred* when it is in *cluster*, else the smallest style name."""
    if not cluster:
        raise ValueError("Cannot choose a keeper from an empty cluster")
    if preferred in cluster:
        return preferred
    return min(cluster)


def decide_cluster(cluster: Sequence[str], preferred: str = PREFERRED_STYLE) -> ClusterDecision:
    """Build the keep/remove decision for *cluster*, preserving its order in ``remove``."""
    if len(cluster) < 2:
        raise ValueError(f"A duplicate cluster needs at least two styles, got {list(cluster)}")
    keep = choose_keeper(cluster, preferred)
    return ClusterDecision(keep=keep, remove=[style for style in cluster if style != keep])
