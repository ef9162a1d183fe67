"""Citeweaver: inline citation tracking for rich-text documents."""

from __future__ import annotations

from citeweaver.models import CitationData, CitationFormat, Selection
from citeweaver.session import DocumentSession, open_session
from citeweaver.store import CitationStore

__all__ = [
    "CitationData",
    "CitationFormat",
    "CitationStore",
    "DocumentSession",
    "Selection",
    "open_session",
]

__version__ = "0.1.0"
