"""Ordinal indexing of citations around a cursor."""

from __future__ import annotations

import contextlib
from typing import Iterator

from citeweaver.errors import MissingMarkerError
from citeweaver.formats.iterator import iterate
from citeweaver.formats.markup import marker_html, read_citation
from citeweaver.logging import get_logger
from citeweaver.models.citation import CitationData, CitationLocation, CitationLocations
from citeweaver.models.formats import MARKER_FORMAT
from citeweaver.session import DocumentSession

logger = get_logger(__name__)

DEFAULT_MARKER_ID = "CITEWEAVER-CURSOR"


@contextlib.contextmanager
def transient_marker(
    session: DocumentSession,
    position: int,
    *,
    marker_id: str = DEFAULT_MARKER_ID,
) -> Iterator[None]:
    """Hold a zero-width marker at `position` for the duration of the block.

    The marker is removed on exit, whether or not the block raised.

    Raises:
        MissingMarkerError: The marker was gone when the block finished.
    """

    session.insert_at(position, marker_html(session.registry.get(MARKER_FORMAT), marker_id))
    try:
        yield
    finally:
        _remove_marker(session, marker_id)


def _remove_marker(session: DocumentSession, marker_id: str) -> None:
    for span in iterate(session, MARKER_FORMAT):
        if session.attributes(span).get("id") == marker_id:
            session.remove(span)
            return
    logger.error("Transient marker %r missing at cleanup", marker_id)
    raise MissingMarkerError(marker_id)


def index(
    session: DocumentSession,
    format_name: str,
    position: int,
    *,
    current_id: str | None = None,
    marker_id: str = DEFAULT_MARKER_ID,
) -> CitationData:
    """Locate the citation at `position` among all citations of `format_name`.

    Spans before the marker carry their ordinal. Offsets in the "after" list are local to
    that list: the first span after the marker has offset 0, not its document ordinal.
    When `current_id` names an existing citation (the one being edited), that citation
    is represented by the marker and left out of both lists.

    Args:
        session: Document session.
        format_name: Citation format to index.
        position: Text offset of the citation being composed or edited.
        current_id: Optional id of the citation being edited.
        marker_id: Id given to the transient marker.

    Returns:
        Fresh `CitationData`; empty lists and index 0 when fewer than two entries exist.
    """

    with transient_marker(session, position, marker_id=marker_id):
        sequence: list[str | None] = []
        for span in iterate(session, format_name, MARKER_FORMAT):
            if span.format_name == MARKER_FORMAT:
                if session.attributes(span).get("id") == marker_id:
                    sequence.append(None)
                continue
            citation_id = read_citation(session, span).id
            if current_id is not None and citation_id == current_id:
                continue
            sequence.append(citation_id)

        data = CitationData()
        if len(sequence) > 1:
            before: list[CitationLocation] = []
            after: list[CitationLocation] = []
            current = -1
            for i, entry in enumerate(sequence):
                if entry is None:
                    current = i
                    continue
                if current < 0:
                    before.append(CitationLocation(entry, i))
                else:
                    # Local to the after list
                    after.append(CitationLocation(entry, i - current - 1))
            data = CitationData(
                current_index=max(current, 0),
                locations=CitationLocations(before=before, after=after),
            )

    logger.debug(
        "Indexed position %d: current=%d before=%d after=%d",
        position,
        data.current_index,
        len(data.locations.before),
        len(data.locations.after),
    )
    return data
