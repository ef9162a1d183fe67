"""Group merging of citation items."""

from __future__ import annotations

from typing import Sequence

from citeweaver.adapters.protocol import Span
from citeweaver.formats.markup import read_citation, with_citation
from citeweaver.logging import get_logger
from citeweaver.models.citation import CitationFormat, ItemId
from citeweaver.session import DocumentSession

logger = get_logger(__name__)


def merge_items(new_items: Sequence[ItemId], existing_items: Sequence[ItemId] | None) -> list[ItemId]:
    """Union two item sequences, keeping order.

    The result is `existing_items` in their order followed by each new item not seen yet,
    in `new_items` order. Repeats inside either input are dropped.

    Args:
        new_items: Items being added.
        existing_items: Items already on the citation; `None` counts as empty.

    Returns:
        A fresh list.
    """

    out: list[ItemId] = []
    seen: set[ItemId] = set()
    for x in list(existing_items or []) + list(new_items):
        if x not in seen:
            out.append(x)
            seen.add(x)
    return out


def merge_into(session: DocumentSession, span: Span, new_items: Sequence[ItemId]) -> CitationFormat:
    """Fold `new_items` into one span's items and write it back.

    Returns:
        The citation as stored after the merge.
    """

    attrs = session.attributes(span)
    citation = read_citation(session, span)
    merged = merge_items(new_items, citation.items)
    if merged == citation.items:
        logger.debug("Merge into %r changed nothing", citation.id)
        return citation

    updated = citation.model_copy(update={"items": merged})
    session.set_attributes(span, with_citation(attrs, updated))
    logger.debug("Merged %d item(s) into %r", len(merged) - len(citation.items), citation.id)
    return updated


def collapse(session: DocumentSession, spans: Sequence[Span], new_items: Sequence[ItemId]) -> CitationFormat:
    """Merge several touching spans into the leftmost one, then add `new_items`.

    The fold runs left to right: the leftmost span keeps its items first, each later span
    contributes its items in reading order, `new_items` come last. Every span but the
    leftmost is removed, so exactly one span remains.
    """

    if not spans:
        raise ValueError("collapse needs at least one span")
    ordered = sorted(spans, key=lambda s: (s.start, s.end))
    if len(ordered) == 1:
        return merge_into(session, ordered[0], new_items)

    citations = [read_citation(session, s) for s in ordered]
    items: list[ItemId] = list(citations[0].items)
    for c in citations[1:]:
        items = merge_items(c.items, items)
    items = merge_items(new_items, items)

    # Right to left so earlier offsets stay put between writes
    for span in reversed(ordered[1:]):
        session.remove(session.refresh(span))

    survivor = session.refresh(ordered[0])
    updated = citations[0].model_copy(update={"items": items})
    session.set_attributes(survivor, with_citation(session.attributes(survivor), updated))
    logger.info(
        "Collapsed %d citations into %r (%d items)",
        len(ordered),
        updated.id,
        len(items),
    )
    return updated
