"""Exact duplicate resolution by content fingerprint."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Mapping

from tqdm import tqdm

from .decisions import PREFERRED_STYLE, decide_cluster
from ..features.fingerprint import file_fingerprint
from ..io.models import IconDecision

logger = logging.getLogger(__name__)

Fingerprinter = Callable[[Path], str]


def hash_clusters(variants: Mapping[str, Path], fingerprint: Fingerprinter = file_fingerprint) -> List[List[str]]:
    """Return the groups of styles in *variants* that share a fingerprint.

    Singleton groups are dropped. Styles keep the order of *variants*.
    """
    by_hash: Dict[str, List[str]] = {}
    for style, path in variants.items():
        by_hash.setdefault(fingerprint(path), []).append(style)
    return [styles for styles in by_hash.values() if len(styles) > 1]


def resolve_exact(
    groups: Mapping[str, Mapping[str, Path]],
    preferred: str = PREFERRED_STYLE,
    fingerprint: Fingerprinter = file_fingerprint,
) -> Dict[str, IconDecision]:
    """Return a decision for every icon whose styles contain byte-identical files."""
    decisions: Dict[str, IconDecision] = {}
    for icon_name in tqdm(sorted(groups), desc="Hashing icons", unit="icon", leave=False):
        variants = groups[icon_name]
        if len(variants) < 2:
            continue
        clusters = hash_clusters(variants, fingerprint)
        if not clusters:
            continue
        decisions[icon_name] = IconDecision(
            icon_name=icon_name,
            clusters=[decide_cluster(cluster, preferred) for cluster in clusters],
        )
        logger.debug("%s: %d identical cluster(s)", icon_name, len(clusters))
    return decisions
