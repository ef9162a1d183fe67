"""Protocol definitions for pluggable document backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, TypeVar

from citeweaver.errors import InvalidPositionError
from citeweaver.models.formats import FormatRegistry

D = TypeVar("D")


@dataclass(frozen=True)
class Span:
    """A registered format occurrence, borrowed from a document for one operation.

    `start`/`end` are text offsets (`start == end` for zero-width spans). `key` is the
    backend handle and is only meaningful against the document it was read from.
    """

    format_name: str
    start: int
    end: int
    key: Any = field(compare=False, repr=False)

    def touches(self, position: int) -> bool:
        return self.start == position or self.end == position

    def strictly_contains(self, position: int) -> bool:
        return self.start < position < self.end


class DocumentAdapter(ABC, Generic[D]):
    """Protocol for document backends.

    Every write returns the document the caller must hold from then on. Mutable backends
    return the same object they were given; persistent backends return a new value.
    """

    name: str = "abstract"

    def __init__(self, registry: FormatRegistry) -> None:
        self.registry = registry

    @abstractmethod
    def parse(self, html: str) -> D:
        """Build a document from HTML markup."""

    @abstractmethod
    def serialize(self, doc: D) -> str:
        """Render a document back to HTML markup."""

    @abstractmethod
    def text_length(self, doc: D) -> int:
        """Number of text characters in the document."""

    @abstractmethod
    def spans(self, doc: D) -> Iterator[Span]:
        """Yield every registered format span in reading order."""

    @abstractmethod
    def attributes(self, doc: D, span: Span) -> dict[str, str]:
        """Return a copy of a span's markup attributes."""

    @abstractmethod
    def set_attributes(self, doc: D, span: Span, attributes: dict[str, str]) -> D:
        """Replace a span's whole attribute set."""

    @abstractmethod
    def insert_at(self, doc: D, position: int, html: str) -> D:
        """Splice an HTML fragment in at a text offset."""

    @abstractmethod
    def remove(self, doc: D, span: Span) -> D:
        """Remove a span together with its content."""

    def check_position(self, doc: D, position: int) -> None:
        length = self.text_length(doc)
        if not 0 <= position <= length:
            raise InvalidPositionError(position, length)
