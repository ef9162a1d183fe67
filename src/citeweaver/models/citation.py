"""Citation models.

Positions are never stored on these models; they are derived from a fresh document traversal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ItemId = Union[str, int]


class CitationFormat(BaseModel):
    """A single inline citation marker and its reference-ID membership."""

    id: str = ""
    items: list[ItemId] = Field(default_factory=list)
    editable: bool = False

    @field_validator("items")
    @classmethod
    def _dedupe_items(cls, value: list[ItemId]) -> list[ItemId]:
        # First occurrence wins
        return list(dict.fromkeys(value))


class CitationLocation(NamedTuple):
    """A `(span_id, offset)` pair."""

    span_id: str
    offset: int


class CitationLocations(BaseModel):
    """Citations before and after the current one, in reading order."""

    before: list[CitationLocation] = Field(default_factory=list)
    after: list[CitationLocation] = Field(default_factory=list)


class CitationData(BaseModel):
    """Ordinal position of the current citation and the citations around it."""

    model_config = ConfigDict(populate_by_name=True)

    current_index: int = Field(default=0, ge=0, alias="currentIndex")
    locations: CitationLocations = Field(default_factory=CitationLocations)


@dataclass(frozen=True)
class Selection:
    """A text selection between two document offsets."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"selection start {self.start} after end {self.end}")

    @property
    def collapsed(self) -> bool:
        return self.start == self.end


Position = Union[int, Selection]
