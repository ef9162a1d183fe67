"""Citation processor payloads.

Shapes follow the citeproc citation object so an external CSL engine can consume them
directly. Only the data hand-off is modelled here; rendering happens elsewhere.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from citeweaver.models.citation import CitationData, CitationFormat, ItemId

CSL_CITATION_SCHEMA = "https://github.com/citation-style-language/schema/raw/master/csl-citation.json"


class CslCitationItem(BaseModel):
    id: ItemId


class CslCitationProperties(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    note_index: int = Field(default=0, ge=0, alias="noteIndex")


class CslCitation(BaseModel):
    """A citation cluster in citeproc's input format."""

    model_config = ConfigDict(populate_by_name=True)

    csl_schema: Literal[
        "https://github.com/citation-style-language/schema/raw/master/csl-citation.json"
    ] = Field(default=CSL_CITATION_SCHEMA, alias="schema")
    citation_id: str = Field(alias="citationID")
    citation_items: list[CslCitationItem] = Field(default_factory=list, alias="citationItems")
    properties: CslCitationProperties = Field(default_factory=CslCitationProperties)

    @classmethod
    def from_citation(cls, citation: CitationFormat, *, note_index: int = 0) -> "CslCitation":
        return cls(
            citation_id=citation.id,
            citation_items=[CslCitationItem(id=i) for i in citation.items],
            properties=CslCitationProperties(note_index=note_index),
        )


class CitationCluster(BaseModel):
    """Everything a numbering processor needs to place one citation.

    `citations_pre` and `citations_post` are `[citationID, noteIndex]` pairs, in reading order.
    """

    model_config = ConfigDict(populate_by_name=True)

    citation: CslCitation
    current_index: int = Field(default=0, ge=0, alias="currentIndex")
    citations_pre: list[tuple[str, int]] = Field(default_factory=list, alias="citationsPre")
    citations_post: list[tuple[str, int]] = Field(default_factory=list, alias="citationsPost")

    @classmethod
    def from_data(cls, citation: CitationFormat, data: CitationData) -> "CitationCluster":
        # In-text citations all live at note index 0
        return cls(
            citation=CslCitation.from_citation(citation),
            current_index=data.current_index,
            citations_pre=[(loc.span_id, 0) for loc in data.locations.before],
            citations_post=[(loc.span_id, 0) for loc in data.locations.after],
        )
