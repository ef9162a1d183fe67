"""Shared helpers for walking parsed HTML with stable text offsets.

Offsets count only plain text and CDATA nodes. Comments, doctypes, processing
instructions and script/style contents never contribute.
"""

from __future__ import annotations

from typing import Iterator

from bs4 import BeautifulSoup, CData, NavigableString, PageElement, Tag

_TEXT_TYPES = (NavigableString, CData)


def is_text(node: PageElement) -> bool:
    return type(node) in _TEXT_TYPES


def text_length(node: PageElement) -> int:
    """Length of the counted text inside `node`."""

    if is_text(node):
        return len(node)  # type: ignore[arg-type]
    if not isinstance(node, Tag):
        return 0
    return sum(len(d) for d in node.descendants if is_text(d))  # type: ignore[arg-type]


def iter_offsets(root: Tag) -> Iterator[tuple[PageElement, int]]:
    """Yield every descendant with the text offset at which it starts."""

    offset = 0
    for node in root.descendants:
        yield node, offset
        if is_text(node):
            offset += len(node)  # type: ignore[arg-type]


def tag_classes(tag: Tag) -> list[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        return classes.split()
    return list(classes)


def tag_attributes(tag: Tag) -> dict[str, str]:
    """Flatten a tag's attributes to plain strings (multi-valued ones space-joined)."""

    out: dict[str, str] = {}
    for k, v in tag.attrs.items():
        out[k] = " ".join(v) if isinstance(v, list) else str(v)
    return out


def parse_fragment(html: str, parser: str) -> BeautifulSoup:
    return BeautifulSoup(html, parser)


def belongs_to(node: PageElement, root: Tag) -> bool:
    parent = node.parent
    while parent is not None:
        if parent is root:
            return True
        parent = parent.parent
    return False
