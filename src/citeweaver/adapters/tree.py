"""TreeAdapter: mutable DOM-like documents edited in place."""

from __future__ import annotations

from typing import Iterator

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from citeweaver.adapters.protocol import DocumentAdapter, Span
from citeweaver.adapters.utils import (
    belongs_to,
    is_text,
    iter_offsets,
    parse_fragment,
    tag_attributes,
    tag_classes,
    text_length,
)
from citeweaver.errors import AdapterError
from citeweaver.logging import get_logger
from citeweaver.models.formats import FormatRegistry

logger = get_logger(__name__)


class TreeAdapter(DocumentAdapter[BeautifulSoup]):
    """Backend over a BeautifulSoup tree.

    Writes mutate the soup and hand the same object back.
    """

    name = "tree"

    def __init__(self, registry: FormatRegistry, *, parser: str = "html.parser") -> None:
        super().__init__(registry)
        self.parser = parser

    def parse(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html, self.parser)

    def serialize(self, doc: BeautifulSoup) -> str:
        return doc.decode()

    def text_length(self, doc: BeautifulSoup) -> int:
        return text_length(doc)

    def spans(self, doc: BeautifulSoup) -> Iterator[Span]:
        for node, offset in iter_offsets(doc):
            if not isinstance(node, Tag):
                continue
            name = self.registry.match(tag_classes(node))
            if name is None:
                continue
            yield Span(format_name=name, start=offset, end=offset + text_length(node), key=node)

    def attributes(self, doc: BeautifulSoup, span: Span) -> dict[str, str]:
        return tag_attributes(self._resolve(doc, span))

    def set_attributes(self, doc: BeautifulSoup, span: Span, attributes: dict[str, str]) -> BeautifulSoup:
        tag = self._resolve(doc, span)
        # One assignment so no partial attribute set is ever visible
        tag.attrs = dict(attributes)
        return doc

    def insert_at(self, doc: BeautifulSoup, position: int, html: str) -> BeautifulSoup:
        self.check_position(doc, position)
        nodes = list(parse_fragment(html, self.parser).contents)
        if not nodes:
            return doc

        last_before: PageElement | None = None
        for node, offset in iter_offsets(doc):
            if not is_text(node) or len(node) == 0:  # type: ignore[arg-type]
                continue
            end = offset + len(node)  # type: ignore[arg-type]
            if offset < position < end:
                self._split_and_insert(node, position - offset, nodes)  # type: ignore[arg-type]
                return doc
            if offset == position:
                anchor = self._outermost_format(node, leading=True)
                for n in nodes:
                    anchor.insert_before(n)
                return doc
            if end == position:
                last_before = node

        if last_before is None:
            for n in nodes:
                doc.append(n)
            return doc

        anchor = self._outermost_format(last_before, leading=False)
        for n in nodes:
            anchor.insert_after(n)
            anchor = n
        return doc

    def remove(self, doc: BeautifulSoup, span: Span) -> BeautifulSoup:
        self._resolve(doc, span).decompose()
        return doc

    def _resolve(self, doc: BeautifulSoup, span: Span) -> Tag:
        tag = span.key
        if not isinstance(tag, Tag) or not belongs_to(tag, doc):
            raise AdapterError(f"span {span!r} is not part of this document")
        return tag

    def _outermost_format(self, node: PageElement, *, leading: bool) -> PageElement:
        """Climb out of registered format elements that begin (or end) at `node`.

        New content then lands beside them. Elements with text on the near side of `node`
        are left alone, so text in the middle of a citation stays inside it.
        """

        anchor = current = node
        parent = node.parent
        while isinstance(parent, Tag) and not isinstance(parent, BeautifulSoup):
            siblings = current.previous_siblings if leading else current.next_siblings
            if any(text_length(s) for s in siblings):
                break
            if self.registry.match(tag_classes(parent)) is not None:
                anchor = parent
            current, parent = parent, parent.parent
        return anchor

    @staticmethod
    def _split_and_insert(node: NavigableString, at: int, nodes: list[PageElement]) -> None:
        text = str(node)
        left = NavigableString(text[:at])
        right = NavigableString(text[at:])
        node.replace_with(left)
        left.insert_after(right)
        for n in nodes:
            right.insert_before(n)
