"""Format iteration in reading order."""

from __future__ import annotations

from typing import Iterator

from citeweaver.adapters.protocol import Span
from citeweaver.session import DocumentSession


def iterate(session: DocumentSession, *format_names: str) -> Iterator[Span]:
    """Yield spans of any of `format_names`, left to right.

    Each call walks the current document afresh. Spans are yielded whatever their
    attributes look like; decoding and normalisation are up to the caller.
    """

    wanted = frozenset(format_names)
    for span in session.spans():
        if span.format_name in wanted:
            yield span


def find_by_id(session: DocumentSession, format_name: str, citation_id: str) -> Span | None:
    """First span of `format_name` whose `id` attribute equals `citation_id`."""

    for span in iterate(session, format_name):
        if session.attributes(span).get("id") == citation_id:
            return span
    return None
