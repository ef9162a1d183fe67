"""Pydantic models used across the project."""

from __future__ import annotations

from citeweaver.models.citation import (
    CitationData,
    CitationFormat,
    CitationLocation,
    CitationLocations,
    ItemId,
    Position,
    Selection,
)
from citeweaver.models.csl import CitationCluster, CslCitation, CslCitationItem
from citeweaver.models.formats import MARKER_FORMAT, FormatRegistry, FormatType
from citeweaver.models.richtext import FormatRun, RichTextValue

__all__ = [
    "CitationCluster",
    "CitationData",
    "CitationFormat",
    "CitationLocation",
    "CitationLocations",
    "CslCitation",
    "CslCitationItem",
    "FormatRegistry",
    "FormatRun",
    "FormatType",
    "ItemId",
    "MARKER_FORMAT",
    "Position",
    "RichTextValue",
    "Selection",
]
