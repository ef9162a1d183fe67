"""One-time migration of legacy citation markup.

Older documents keep item ids under a foreign attribute (`data-reflist`) instead of
`data-items`. The migration is a merge of the legacy items into the current ones, so
running it twice is a no-op.
"""

from __future__ import annotations

from citeweaver.errors import MalformedSpanError
from citeweaver.formats.iterator import iterate
from citeweaver.formats.markup import (
    LEGACY_ITEMS_ATTR,
    citation_from_attributes,
    decode_items,
    with_citation,
)
from citeweaver.formats.merge import merge_items
from citeweaver.logging import get_logger
from citeweaver.session import DocumentSession

logger = get_logger(__name__)


def normalize_legacy(
    session: DocumentSession,
    format_name: str,
    *,
    legacy_attribute: str = LEGACY_ITEMS_ATTR,
) -> int:
    """Migrate every span that still carries `legacy_attribute`.

    Returns:
        Number of spans migrated.
    """

    legacy = [s for s in iterate(session, format_name) if legacy_attribute in session.attributes(s)]
    for stale in legacy:
        span = session.refresh(stale)
        attrs = session.attributes(span)
        raw = attrs.pop(legacy_attribute)
        try:
            legacy_items = decode_items(raw)
        except MalformedSpanError as e:
            logger.warning("Dropping malformed legacy items on %r: %s", attrs.get("id", ""), e)
            legacy_items = []

        citation = citation_from_attributes(attrs)
        migrated = citation.model_copy(
            update={"items": merge_items(legacy_items, citation.items), "editable": True}
        )
        session.set_attributes(span, with_citation(attrs, migrated))

    if legacy:
        logger.info("Normalized %d legacy citation(s)", len(legacy))
    return len(legacy)
