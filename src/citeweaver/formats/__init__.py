"""Citation format operations: iteration, neighbors, merging and indexing."""

from __future__ import annotations

from citeweaver.formats.indexer import index, transient_marker
from citeweaver.formats.iterator import find_by_id, iterate
from citeweaver.formats.merge import collapse, merge_into, merge_items
from citeweaver.formats.neighbors import get_neighbors
from citeweaver.formats.normalize import normalize_legacy

__all__ = [
    "collapse",
    "find_by_id",
    "get_neighbors",
    "index",
    "iterate",
    "merge_into",
    "merge_items",
    "normalize_legacy",
    "transient_marker",
]
