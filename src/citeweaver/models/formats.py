"""Registered inline format types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

MARKER_FORMAT = "citeweaver/marker"


@dataclass(frozen=True)
class FormatType:
    """An inline format recognised in document markup by its CSS class."""

    name: str
    class_name: str
    tag: str = "span"


class FormatRegistry:
    """Lookup of format types by name and by markup class."""

    def __init__(self, types: Iterable[FormatType]) -> None:
        self._by_name: dict[str, FormatType] = {}
        for t in types:
            self._by_name[t.name] = t

    @classmethod
    def for_citations(
        cls,
        *,
        format_name: str,
        citation_class: str,
        marker_class: str,
    ) -> "FormatRegistry":
        """Registry with the citation format and the transient cursor marker."""

        return cls(
            [
                FormatType(name=format_name, class_name=citation_class),
                FormatType(name=MARKER_FORMAT, class_name=marker_class),
            ]
        )

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._by_name)

    def get(self, name: str) -> FormatType:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"unregistered format {name!r}") from None

    def match(self, classes: Iterable[str]) -> str | None:
        """Return the name of the first format whose class is among `classes`."""

        present = set(classes)
        for t in self._by_name.values():
            if t.class_name in present:
                return t.name
        return None
