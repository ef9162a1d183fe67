"""Explicit editing sessions.

A `DocumentSession` pairs one adapter with the document it currently holds. Every write
rebinds `session.document` to whatever the adapter returns, so code written against the
session works the same for in-place trees and persistent values.
"""

from __future__ import annotations

import uuid
from typing import Any, Generic, Iterator, Literal

from citeweaver.adapters.protocol import D, DocumentAdapter, Span
from citeweaver.adapters.tree import TreeAdapter
from citeweaver.adapters.value import ValueAdapter
from citeweaver.config import Settings
from citeweaver.errors import AdapterError
from citeweaver.logging import get_logger
from citeweaver.models.formats import FormatRegistry

logger = get_logger(__name__)

Backend = Literal["tree", "value"]


class DocumentSession(Generic[D]):
    """One document handed to the citation subsystem, with the adapter that edits it."""

    def __init__(self, adapter: DocumentAdapter[D], document: D, *, session_id: str | None = None) -> None:
        self.adapter = adapter
        self._document = document
        self.id = session_id or uuid.uuid4().hex[:12]

    @property
    def document(self) -> D:
        return self._document

    @property
    def registry(self) -> FormatRegistry:
        return self.adapter.registry

    # Reads

    def spans(self) -> Iterator[Span]:
        return self.adapter.spans(self._document)

    def attributes(self, span: Span) -> dict[str, str]:
        return self.adapter.attributes(self._document, span)

    def text_length(self) -> int:
        return self.adapter.text_length(self._document)

    def to_html(self) -> str:
        return self.adapter.serialize(self._document)

    def refresh(self, span: Span) -> Span:
        """Re-read `span` from the current document by format and range."""

        for s in self.spans():
            if s.format_name == span.format_name and s.start == span.start and s.end == span.end:
                return s
        raise AdapterError(f"span {span!r} no longer present")

    # Writes

    def set_attributes(self, span: Span, attributes: dict[str, str]) -> None:
        self._document = self.adapter.set_attributes(self._document, span, attributes)

    def insert_at(self, position: int, html: str) -> None:
        self._document = self.adapter.insert_at(self._document, position, html)
        logger.debug("Inserted %d chars of markup at %d", len(html), position)

    def remove(self, span: Span) -> None:
        self._document = self.adapter.remove(self._document, span)
        logger.debug("Removed %s span at [%d, %d)", span.format_name, span.start, span.end)


def build_registry(settings: Settings) -> FormatRegistry:
    return FormatRegistry.for_citations(
        format_name=settings.format_name,
        citation_class=settings.citation_class,
        marker_class=settings.marker_class,
    )


def make_adapter(backend: Backend, settings: Settings) -> DocumentAdapter[Any]:
    """Select the adapter for the active host surface."""

    registry = build_registry(settings)
    if backend == "tree":
        return TreeAdapter(registry, parser=settings.html_parser)
    if backend == "value":
        return ValueAdapter(registry, parser=settings.html_parser)
    raise ValueError(f"unknown backend {backend!r}")


def open_session(html: str, settings: Settings, *, backend: Backend | None = None) -> DocumentSession[Any]:
    """Parse `html` with the chosen backend and wrap it in a session."""

    adapter = make_adapter(backend or settings.default_backend, settings)
    session = DocumentSession(adapter, adapter.parse(html))
    logger.debug("Opened %s session %s (%d chars)", adapter.name, session.id, len(html))
    return session
