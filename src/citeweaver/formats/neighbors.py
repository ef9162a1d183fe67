"""Neighbor resolution: spans touching a position with zero gap."""

from __future__ import annotations

from citeweaver.adapters.protocol import Span
from citeweaver.formats.iterator import iterate
from citeweaver.session import DocumentSession


def get_neighbors(format_name: str, session: DocumentSession, position: int) -> list[Span]:
    """Return every `format_name` span whose start or end equals `position`.

    One linear scan; nothing is cached since any write invalidates positions.
    """

    return [span for span in iterate(session, format_name) if span.touches(position)]
