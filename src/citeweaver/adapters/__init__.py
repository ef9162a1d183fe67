"""Document backends.

Both backends expose the same `DocumentAdapter` contract over different document
representations.
"""

from __future__ import annotations

from citeweaver.adapters.protocol import DocumentAdapter, Span
from citeweaver.adapters.tree import TreeAdapter
from citeweaver.adapters.value import ValueAdapter

__all__ = [
    "DocumentAdapter",
    "Span",
    "TreeAdapter",
    "ValueAdapter",
]
