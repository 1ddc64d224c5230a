"""Union-find over style labels, used to split equal-pair graphs into components."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple


class UnionFind:
    """Disjoint set union with path compression and union by rank.

    Insertion order is remembered so that :meth:`components` is stable for a
    given sequence of ``add``/``union`` calls.
    """

    def __init__(self, items: Iterable[str] = ()) -> None:
        self._parent: Dict[str, str] = {}
        self._rank: Dict[str, int] = {}
        self.add_all(items)

    def find(self, item: str) -> str:
        """Return the canonical representative for *item*."""
        if item not in self._parent:
            self._parent[item] = item
            self._rank[item] = 0
            return item
        if self._parent[item] != item:
            self._parent[item] = self.find(self._parent[item])
        return self._parent[item]

    def union(self, a: str, b: str) -> None:
        """Merge the sets containing *a* and *b*."""
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return
        if self._rank[root_a] < self._rank[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        if self._rank[root_a] == self._rank[root_b]:
            self._rank[root_a] += 1

    def add_all(self, items: Iterable[str]) -> None:
        for item in items:
            self.find(item)

    def link_all(self, edges: Iterable[Tuple[str, str]]) -> None:
        for left, right in edges:
            self.union(left, right)

    def components(self, min_size: int = 1) -> List[List[str]]:
        """Return member lists in insertion order, dropping sets below *min_size*."""
        buckets: Dict[str, List[str]] = {}
        for item in self._parent:
            buckets.setdefault(self.find(item), []).append(item)
        return [members for members in buckets.values() if len(members) >= min_size]
