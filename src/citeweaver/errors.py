"""Exception types raised by the citation subsystem."""

from __future__ import annotations


class CiteweaverError(Exception):
    """Base class for all citeweaver errors."""


class MalformedSpanError(CiteweaverError):
    """A citation span carries an `items` value that cannot be decoded.

    Never fatal: readers catch it and treat the span as having no items.
    """

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"unparseable citation items {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class MissingMarkerError(CiteweaverError):
    """The transient cursor marker vanished before it could be removed."""

    def __init__(self, marker_id: str) -> None:
        super().__init__(f"transient marker {marker_id!r} not found during cleanup")
        self.marker_id = marker_id


class AdapterError(CiteweaverError):
    """A span handle does not belong to the document it was used with."""


class InvalidPositionError(CiteweaverError, ValueError):
    """A document position lies outside the document text."""

    def __init__(self, position: int, length: int) -> None:
        super().__init__(f"position {position} outside document of length {length}")
        self.position = position
        self.length = length


class InvariantError(CiteweaverError):
    """A structural invariant of the citation data was violated."""


class DuplicateCitationIdError(InvariantError):
    """Two citation spans share the same id."""

    def __init__(self, citation_id: str) -> None:
        super().__init__(f"duplicate citation id {citation_id!r}")
        self.citation_id = citation_id


class DuplicateItemError(InvariantError):
    """A citation span lists the same reference identifier twice."""

    def __init__(self, citation_id: str, item: str | int) -> None:
        super().__init__(f"citation {citation_id!r} lists item {item!r} more than once")
        self.citation_id = citation_id
        self.item = item
