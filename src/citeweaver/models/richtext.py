"""Immutable structured rich-text value.

A value is plain text plus a flat list of format runs in document (pre-)order. Runs carry
text offsets and their nesting depth; offsets alone cannot tell `<br><br>` from
`<br><br/></br>`. Every edit produces a new value.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FormatRun(BaseModel):
    """A formatted range `[start, end)` of the value's text."""

    model_config = ConfigDict(frozen=True)

    type: str  # noqa: A003
    tag: str = "span"
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    depth: int = Field(default=0, ge=0)
    attributes: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_range(self) -> "FormatRun":
        if self.end < self.start:
            raise ValueError(f"format run ends ({self.end}) before it starts ({self.start})")
        return self


class RichTextValue(BaseModel):
    """Text with formats; never mutated in place."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    formats: tuple[FormatRun, ...] = ()

    @model_validator(mode="after")
    def _check_bounds(self) -> "RichTextValue":
        depth = -1
        for f in self.formats:
            if f.end > len(self.text):
                raise ValueError(f"format {f.type!r} ends at {f.end} past text length {len(self.text)}")
            if f.depth > depth + 1:
                raise ValueError(f"format {f.type!r} is nested {f.depth} deep under depth {depth}")
            depth = f.depth
        return self
