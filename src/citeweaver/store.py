"""Citation store: the entry point for insert, merge and numbering queries.

The store never caches positions. Every operation starts from a fresh traversal of the
session's current document.
"""

from __future__ import annotations

from typing import Callable, Sequence

from citeweaver.adapters.protocol import Span
from citeweaver.config import Settings, load_settings
from citeweaver.errors import DuplicateCitationIdError, DuplicateItemError, InvalidPositionError
from citeweaver.formats.indexer import index
from citeweaver.formats.iterator import find_by_id, iterate
from citeweaver.formats.markup import ITEMS_ATTR, citation_html, decode_items, read_citation, with_citation
from citeweaver.formats.merge import collapse, merge_into, merge_items
from citeweaver.formats.neighbors import get_neighbors
from citeweaver.formats.normalize import normalize_legacy
from citeweaver.logging import get_logger, session_context
from citeweaver.models.citation import CitationData, CitationFormat, ItemId, Position, Selection
from citeweaver.models.csl import CitationCluster, CslCitation
from citeweaver.session import DocumentSession
from citeweaver.utils.ids import random_id_factory

logger = get_logger(__name__)


class CitationStore:
    """Citation operations over one document session."""

    def __init__(
        self,
        session: DocumentSession,
        *,
        settings: Settings | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or load_settings()
        self.format_name = self.settings.format_name
        self._new_id = id_factory or random_id_factory(self.settings.id_prefix)
        self._normalized = False

    @classmethod
    def load(
        cls,
        session: DocumentSession,
        *,
        settings: Settings | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> "CitationStore":
        """Create a store for a freshly loaded document and normalise legacy markup."""

        store = cls(session, settings=settings, id_factory=id_factory)
        store.normalize()
        return store

    def normalize(self) -> int:
        """Run the legacy migration once per load."""

        if self._normalized:
            return 0
        with session_context(session_id=self.session.id, op="normalize"):
            migrated = normalize_legacy(
                self.session,
                self.format_name,
                legacy_attribute=self.settings.legacy_items_attribute,
            )
        self._normalized = True
        return migrated

    # Queries

    def citations(self) -> list[CitationFormat]:
        """Snapshot of every citation in reading order."""

        return [read_citation(self.session, s) for s in iterate(self.session, self.format_name)]

    def find(self, citation_id: str) -> Span | None:
        return find_by_id(self.session, self.format_name, citation_id)

    def cited_items(self) -> list[ItemId]:
        """Distinct reference ids in order of first citation."""

        items: list[ItemId] = []
        for citation in self.citations():
            items = merge_items(citation.items, items)
        return items

    def get_citation_data(self, position: Position) -> CitationData:
        """Ordinal data for the citation at `position`.

        A cursor strictly inside a citation, or a selection on one, designates that
        citation as the current one.
        """

        with session_context(session_id=self.session.id, op="get_citation_data"):
            current = self._current_span(position)
            current_id = read_citation(self.session, current).id if current is not None else None
            return index(
                self.session,
                self.format_name,
                self._point(position),
                current_id=current_id,
                marker_id=self.settings.marker_id,
            )

    def citation_cluster(self, position: Position, items: Sequence[ItemId] = ()) -> CitationCluster:
        """Processor payload for the citation at `position`.

        When no citation sits at `position`, the payload describes a prospective one made
        of `items`.
        """

        current = self._current_span(position)
        if current is not None:
            citation = read_citation(self.session, current)
        else:
            citation = CitationFormat(id=self._new_id(), items=list(items), editable=True)
        return CitationCluster.from_data(citation, self.get_citation_data(position))

    def citation_clusters(self) -> list[CslCitation]:
        """Processor payloads for every citation, for a full rebuild."""

        return [CslCitation.from_citation(c) for c in self.citations()]

    def validate(self) -> None:
        """Check id uniqueness and item uniqueness across the document.

        Raises:
            DuplicateCitationIdError: Two spans share an id.
            DuplicateItemError: A span's stored items contain a repeat.
        """

        seen: set[str] = set()
        for span in iterate(self.session, self.format_name):
            attrs = self.session.attributes(span)
            citation_id = attrs.get("id", "")
            if citation_id in seen:
                raise DuplicateCitationIdError(citation_id)
            seen.add(citation_id)
            raw = decode_items(attrs.get(ITEMS_ATTR), dedupe=False)
            found: set[ItemId] = set()
            for item in raw:
                if item in found:
                    raise DuplicateItemError(citation_id, item)
                found.add(item)

    # Edits

    def insert_citation(self, selected_items: Sequence[ItemId], position: Position) -> str | None:
        """Cite `selected_items` at `position`.

        A citation under the cursor or selection absorbs the items. Otherwise citations
        touching the insertion point are folded into one that absorbs them. Otherwise a
        new citation is created.

        Returns:
            The id of the citation holding the items, or `None` when nothing was selected.
        """

        items = merge_items(selected_items, [])
        if not items:
            logger.debug("insert_citation called without items; nothing to do")
            return None

        with session_context(session_id=self.session.id, op="insert_citation"):
            current = self._current_span(position)
            if current is not None:
                return merge_into(self.session, current, items).id

            point = self._point(position)
            neighbors = get_neighbors(self.format_name, self.session, point)
            if neighbors:
                return collapse(self.session, neighbors, items).id

            citation = CitationFormat(id=self._new_id(), items=items, editable=True)
            self.session.insert_at(
                point,
                citation_html(
                    self.session.registry.get(self.format_name),
                    citation,
                    text=self.settings.placeholder_text,
                ),
            )
            logger.info("Created citation %r with %d item(s) at %d", citation.id, len(items), point)
            return citation.id

    def set_items(self, citation_id: str, items: Sequence[ItemId]) -> bool:
        """Replace a citation's items; an empty list removes the citation.

        Returns:
            False when no citation has that id.
        """

        span = self.find(citation_id)
        if span is None:
            return False
        replacement = merge_items(items, [])
        if not replacement:
            self.session.remove(span)
            logger.info("Removed citation %r (no items left)", citation_id)
            return True

        citation = read_citation(self.session, span).model_copy(update={"items": replacement})
        self.session.set_attributes(span, with_citation(self.session.attributes(span), citation))
        return True

    def remove_citation(self, citation_id: str) -> bool:
        span = self.find(citation_id)
        if span is None:
            return False
        self.session.remove(span)
        logger.info("Removed citation %r", citation_id)
        return True

    # Helpers

    def _point(self, position: Position) -> int:
        point = position.end if isinstance(position, Selection) else position
        length = self.session.text_length()
        if not 0 <= point <= length:
            raise InvalidPositionError(point, length)
        return point

    def _current_span(self, position: Position) -> Span | None:
        if isinstance(position, Selection) and not position.collapsed:
            for span in iterate(self.session, self.format_name):
                inside = span.start <= position.start and position.end <= span.end
                covers = position.start <= span.start and span.end <= position.end
                if inside or covers:
                    return span
            return None

        point = position.start if isinstance(position, Selection) else position
        for span in iterate(self.session, self.format_name):
            if span.strictly_contains(point):
                return span
        return None
