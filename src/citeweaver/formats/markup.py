"""Citation wire attributes.

A citation span is persisted as

    <span class="abt-citation" id="..." data-items='["r1", "r2"]' data-editable="true">[?]</span>

`data-items` is written as a JSON array; comma-separated lists are accepted on read.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from bs4 import BeautifulSoup

from citeweaver.adapters.protocol import Span
from citeweaver.errors import MalformedSpanError
from citeweaver.logging import get_logger
from citeweaver.models.citation import CitationFormat, ItemId
from citeweaver.models.formats import FormatType
from citeweaver.session import DocumentSession

logger = get_logger(__name__)

ID_ATTR = "id"
ITEMS_ATTR = "data-items"
EDITABLE_ATTR = "data-editable"
LEGACY_ITEMS_ATTR = "data-reflist"


def decode_items(raw: str | None, *, dedupe: bool = True) -> list[ItemId]:
    """Decode an items attribute.

    Raises:
        MalformedSpanError: The value is neither a JSON array of ids nor a comma list.
    """

    if raw is None:
        return []
    text = raw.strip()
    if not text:
        return []

    if text[0] in "[{":
        try:
            parsed: Any = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedSpanError(raw, str(e)) from e
        if not isinstance(parsed, list):
            raise MalformedSpanError(raw, "expected a JSON array")
        items: list[ItemId] = []
        for x in parsed:
            if isinstance(x, bool) or not isinstance(x, (str, int)):
                raise MalformedSpanError(raw, f"unsupported item {x!r}")
            items.append(x)
    else:
        items = [p.strip() for p in text.split(",") if p.strip()]

    if dedupe:
        return list(dict.fromkeys(items))
    return items


def encode_items(items: Sequence[ItemId]) -> str:
    return json.dumps(list(items), ensure_ascii=False)


def decode_editable(raw: str | None) -> bool:
    return (raw or "").strip().lower() == "true"


def encode_editable(editable: bool) -> str:
    return "true" if editable else "false"


def citation_from_attributes(attributes: dict[str, str]) -> CitationFormat:
    """Decode attributes, degrading malformed items to an empty list."""

    citation_id = attributes.get(ID_ATTR, "")
    try:
        items = decode_items(attributes.get(ITEMS_ATTR))
    except MalformedSpanError as e:
        logger.warning("Citation %r has malformed items, treating as empty: %s", citation_id, e)
        items = []
    return CitationFormat(
        id=citation_id,
        items=items,
        editable=decode_editable(attributes.get(EDITABLE_ATTR)),
    )


def read_citation(session: DocumentSession, span: Span) -> CitationFormat:
    return citation_from_attributes(session.attributes(span))


def with_citation(attributes: dict[str, str], citation: CitationFormat) -> dict[str, str]:
    """Return `attributes` with the citation fields overwritten."""

    out = dict(attributes)
    if citation.id:
        out[ID_ATTR] = citation.id
    out[ITEMS_ATTR] = encode_items(citation.items)
    out[EDITABLE_ATTR] = encode_editable(citation.editable)
    return out


def _element_html(format_type: FormatType, attributes: dict[str, str], text: str) -> str:
    soup = BeautifulSoup("", "html.parser")
    tag = soup.new_tag(format_type.tag, attrs={"class": format_type.class_name, **attributes})
    if text:
        tag.string = text
    return tag.decode()


def citation_html(format_type: FormatType, citation: CitationFormat, *, text: str) -> str:
    """Markup for a brand new citation span; `text` is a placeholder until rendered."""

    return _element_html(format_type, with_citation({}, citation), text)


def marker_html(format_type: FormatType, marker_id: str) -> str:
    """Markup for the zero-width cursor marker."""

    return _element_html(format_type, {ID_ATTR: marker_id}, "")
