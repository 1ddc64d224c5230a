"""Visual duplicate resolution by rasterizing variants and comparing pixels."""

from __future__ import annotations

import logging
from itertools import combinations
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Sequence, Tuple

from tqdm import tqdm

from .decisions import PREFERRED_STYLE, decide_cluster
from .unionfind import UnionFind
from ..features.compare import bitmaps_equal
from ..features.raster import rasterize_file
from ..io.models import IconDecision

logger = logging.getLogger(__name__)

Edge = Tuple[str, str]
Renderer = Callable[[Path, Path], Path]
Oracle = Callable[[Path, Path], bool]

CLUSTER_INVOLVED = "involved"
CLUSTER_COMPONENTS = "components"
CLUSTERING_MODES = (CLUSTER_INVOLVED, CLUSTER_COMPONENTS)


def scratch_path(scratch_dir: Path, icon_name: str, style: str) -> Path:
    """Return the bitmap location for one (icon, style) variant."""
    return scratch_dir / style / f"{icon_name}.png"


def equal_pairs(bitmaps: Mapping[str, Path], compare: Oracle = bitmaps_equal) -> List[Edge]:
    """Return every unordered style pair whose bitmaps the oracle judges equal."""
    edges: List[Edge] = []
    for left, right in combinations(list(bitmaps), 2):
        if compare(bitmaps[left], bitmaps[right]):
            edges.append((left, right))
    return edges


def involved_styles(styles: Sequence[str], edges: Sequence[Edge]) -> List[str]:
    """Return the styles touched by at least one edge, in *styles* order."""
    touched = {style for edge in edges for style in edge}
    return [style for style in styles if style in touched]


def cluster_styles(
    styles: Sequence[str],
    edges: Sequence[Edge],
    clustering: str = CLUSTER_INVOLVED,
) -> List[List[str]]:
    """Turn the equal-pairs graph over *styles* into duplicate clusters.

    ``involved`` yields at most one cluster holding every style with an edge,
    even when two of its members were never judged equal to each other.
    ``components`` yields one cluster per connected component.
    """
    if clustering == CLUSTER_INVOLVED:
        members = involved_styles(styles, edges)
        return [members] if members else []
    if clustering == CLUSTER_COMPONENTS:
        uf = UnionFind(styles)
        uf.link_all(edges)
        return uf.components(min_size=2)
    raise ValueError(f"Unknown clustering mode: {clustering!r}")


def resolve_visual(
    groups: Mapping[str, Mapping[str, Path]],
    scratch_dir: str | Path,
    preferred: str = PREFERRED_STYLE,
    render: Renderer = rasterize_file,
    compare: Oracle = bitmaps_equal,
    clustering: str = CLUSTER_INVOLVED,
) -> Dict[str, IconDecision]:
    """Return a decision for every icon with visually identical styles.

    Each variant is rendered into *scratch_dir* first; all pairs of one icon
    are compared before its decision is built.
    """
    if clustering not in CLUSTERING_MODES:
        raise ValueError(f"Unknown clustering mode: {clustering!r}")
    scratch_root = Path(scratch_dir)
    scratch_root.mkdir(parents=True, exist_ok=True)

    decisions: Dict[str, IconDecision] = {}
    for icon_name in tqdm(sorted(groups), desc="Comparing icons", unit="icon", leave=False):
        variants = groups[icon_name]
        if len(variants) < 2:
            continue
        bitmaps = {
            style: render(path, scratch_path(scratch_root, icon_name, style))
            for style, path in variants.items()
        }
        edges = equal_pairs(bitmaps, compare)
        clusters = cluster_styles(list(variants), edges, clustering)
        if not clusters:
            continue
        decisions[icon_name] = IconDecision(
            icon_name=icon_name,
            clusters=[decide_cluster(cluster, preferred) for cluster in clusters],
        )
        logger.debug("%s: %d equal pair(s) -> %s", icon_name, len(edges), clusters)
    return decisions
