"""Tests for citation models and the markup codec."""

from __future__ import annotations

import pytest

from citeweaver.errors import MalformedSpanError
from citeweaver.formats.markup import (
    citation_from_attributes,
    citation_html,
    decode_items,
    encode_items,
    with_citation,
)
from citeweaver.models import CitationData, CitationFormat, CitationLocations, FormatType, Selection
from citeweaver.models.csl import CslCitation


def test_citation_format_dedupes_items() -> None:
    """It should keep the first occurrence of each item."""

    assert CitationFormat(id="a", items=["r1", "r2", "r1"]).items == ["r1", "r2"]


def test_citation_data_serializes_with_alias() -> None:
    """It should expose `currentIndex` and location pairs on the wire."""

    data = CitationData(
        current_index=1,
        locations=CitationLocations(before=[("a", 0)], after=[("c", 0)]),
    )

    payload = data.model_dump(mode="json", by_alias=True)
    assert payload == {"currentIndex": 1, "locations": {"before": [["a", 0]], "after": [["c", 0]]}}
    assert data.locations.before[0].span_id == "a"


def test_selection_rejects_reversed_range() -> None:
    """It should not allow a selection ending before it starts."""

    with pytest.raises(ValueError):
        Selection(5, 2)
    assert Selection(3, 3).collapsed


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, []),
        ("", []),
        ('["r1", "r2"]', ["r1", "r2"]),
        ("[1, 2, 1]", [1, 2]),
        ("r1, r2 ,r1", ["r1", "r2"]),
    ],
)
def test_decode_items(raw, expected) -> None:
    """It should read JSON arrays and comma lists."""

    assert decode_items(raw) == expected


@pytest.mark.parametrize("raw", ["[oops", '{"a": 1}', "[true]", "[[1]]"])
def test_decode_items_rejects_garbage(raw) -> None:
    """It should raise on values that are not item lists."""

    with pytest.raises(MalformedSpanError):
        decode_items(raw)


def test_attributes_round_trip() -> None:
    """It should write citation fields without dropping other attributes."""

    citation = CitationFormat(id="a", items=["r1", 2], editable=True)

    attrs = with_citation({"class": "abt-citation", "title": "t"}, citation)

    assert attrs["title"] == "t"
    assert attrs["data-items"] == encode_items(["r1", 2])
    assert citation_from_attributes(attrs) == citation


def test_citation_html_carries_class_and_placeholder() -> None:
    """It should render a span with the format class and placeholder text."""

    html = citation_html(
        FormatType(name="abt/citation", class_name="abt-citation"),
        CitationFormat(id="a", items=["r1"], editable=True),
        text="[?]",
    )

    assert html.startswith('<span class="abt-citation" id="a"')
    assert html.endswith(">[?]</span>")


def test_csl_citation_from_citation() -> None:
    """It should build a citeproc citation object."""

    csl = CslCitation.from_citation(CitationFormat(id="a", items=["r1", 7]))

    payload = csl.model_dump(by_alias=True)
    assert payload["citationID"] == "a"
    assert payload["citationItems"] == [{"id": "r1"}, {"id": 7}]
    assert payload["properties"] == {"noteIndex": 0}
