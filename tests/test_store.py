"""Tests for the CitationStore facade."""

from __future__ import annotations

import pytest

from citeweaver.errors import DuplicateCitationIdError, DuplicateItemError, InvalidPositionError
from citeweaver.models.citation import Selection
from citeweaver.store import CitationStore
from citeweaver.utils.ids import sequential_id_factory

from conftest import cite

THREE = (
    "<p>A" + cite("a", ["r1"]) + " B" + cite("b", ["r2"], text="[2]")
    + " C" + cite("c", ["r3"], text="[3]") + "</p>"
)


@pytest.fixture
def make_store(make_session, settings):
    def _make(html: str) -> CitationStore:
        return CitationStore.load(
            make_session(html),
            settings=settings,
            id_factory=sequential_id_factory(),
        )

    return _make


def _summary(store: CitationStore) -> list[tuple[str, list]]:
    return [(c.id, c.items) for c in store.citations()]


def test_insert_into_empty_document(make_store) -> None:
    """It should create one citation in an empty document and index it alone."""

    store = make_store("")

    citation_id = store.insert_citation(["r1"], 0)

    assert citation_id == "cite-0001"
    assert _summary(store) == [("cite-0001", ["r1"])]
    assert store.citations()[0].editable is True

    data = store.get_citation_data(1)
    assert data.current_index == 0
    assert data.locations.before == []
    assert data.locations.after == []


def test_insert_creates_span_in_text(make_store, settings) -> None:
    """It should splice a placeholder citation in at the cursor."""

    store = make_store("<p>Hello world</p>")

    store.insert_citation(["r1", "r2", "r1"], 5)

    assert _summary(store) == [("cite-0001", ["r1", "r2"])]
    html = store.session.to_html()
    assert f"Hello<span class=\"{settings.citation_class}\"" in html
    assert f">{settings.placeholder_text}</span> world" in html


def test_insert_touching_citation_merges(make_store) -> None:
    """It should merge into a citation that ends at the cursor."""

    store = make_store("<p>Hello world</p>")
    first = store.insert_citation(["r1"], 5)

    second = store.insert_citation(["r1", "r2"], 8)

    assert second == first
    assert _summary(store) == [(first, ["r1", "r2"])]


def test_insert_inside_citation_merges(make_store) -> None:
    """It should merge into the citation the cursor sits in."""

    store = make_store(THREE)

    assert store.insert_citation(["r9"], 7) == "b"
    assert _summary(store) == [("a", ["r1"]), ("b", ["r2", "r9"]), ("c", ["r3"])]


def test_insert_with_selected_citation_merges(make_store) -> None:
    """It should merge into a citation covered by the selection."""

    store = make_store(THREE)

    assert store.insert_citation(["r1"], Selection(11, 14)) == "c"
    assert _summary(store)[-1] == ("c", ["r3", "r1"])


def test_insert_over_text_selection_goes_after_it(make_store) -> None:
    """It should place a new citation at the end of a plain-text selection."""

    store = make_store("<p>Hello world</p>")

    store.insert_citation(["r1"], Selection(0, 5))

    assert store.session.to_html().startswith("<p>Hello<span")


def test_insert_between_two_citations_collapses_them(make_store) -> None:
    """It should fold both touching citations into the left one."""

    store = make_store(cite("x", ["r1"]) + cite("y", ["r2", "r3"], text="[2]"))

    assert store.insert_citation(["r3", "r4"], 3) == "x"
    assert _summary(store) == [("x", ["r1", "r2", "r3", "r4"])]


def test_insert_without_items_is_noop(make_store) -> None:
    """It should ignore an empty selection of references."""

    store = make_store("<p>Hello</p>")
    html = store.session.to_html()

    assert store.insert_citation([], 2) is None
    assert store.session.to_html() == html


def test_insert_rejects_bad_position(make_store) -> None:
    """It should refuse a cursor beyond the document."""

    store = make_store("<p>Hello</p>")

    with pytest.raises(InvalidPositionError):
        store.insert_citation(["r1"], 42)


def test_citation_data_for_middle_citation(make_store) -> None:
    """It should number the citation under the cursor between its neighbours."""

    store = make_store(THREE)

    data = store.get_citation_data(7)

    assert data.current_index == 1
    assert data.locations.before == [("a", 0)]
    assert data.locations.after == [("c", 0)]


def test_citation_cluster_payload(make_store) -> None:
    """It should build a processor payload for the current citation."""

    store = make_store(THREE)

    cluster = store.citation_cluster(7)

    payload = cluster.model_dump(by_alias=True)
    assert payload["citation"]["citationID"] == "b"
    assert payload["citation"]["citationItems"] == [{"id": "r2"}]
    assert payload["citationsPre"] == [("a", 0)]
    assert payload["citationsPost"] == [("c", 0)]


def test_citation_cluster_for_new_citation(make_store) -> None:
    """It should describe a citation that is not in the document yet."""

    store = make_store(THREE)

    cluster = store.citation_cluster(5, ["r7"])

    assert cluster.citation.citation_id == "cite-0001"
    assert [i.id for i in cluster.citation.citation_items] == ["r7"]
    assert cluster.current_index == 1
    assert cluster.citations_post == [("b", 0), ("c", 0)]


def test_cited_items_in_first_citation_order(make_store) -> None:
    """It should list each reference once, in order of first citation."""

    store = make_store(cite("a", ["r2", "r1"]) + " " + cite("b", ["r1", "r3"], text="[2]"))

    assert store.cited_items() == ["r2", "r1", "r3"]
    assert [c.citation_id for c in store.citation_clusters()] == ["a", "b"]


def test_set_items_and_remove(make_store) -> None:
    """It should edit membership and drop citations left empty."""

    store = make_store(THREE)

    assert store.set_items("a", ["r5", "r5", "r6"]) is True
    assert _summary(store)[0] == ("a", ["r5", "r6"])

    assert store.set_items("b", []) is True
    assert store.remove_citation("c") is True
    assert _summary(store) == [("a", ["r5", "r6"])]

    assert store.set_items("missing", ["r1"]) is False
    assert store.remove_citation("missing") is False


def test_validate_detects_duplicate_ids(make_store) -> None:
    """It should flag two citations sharing an id."""

    store = make_store(cite("a", ["r1"]) + cite("a", ["r2"]))

    with pytest.raises(DuplicateCitationIdError):
        store.validate()


def test_validate_detects_duplicate_items(make_store) -> None:
    """It should flag a stored item list with repeats."""

    store = make_store(cite("a", ["r1", "r1"]))

    assert store.citations()[0].items == ["r1"]
    with pytest.raises(DuplicateItemError):
        store.validate()


def test_validate_passes_after_edits(make_store) -> None:
    """It should find no violations after normal store use."""

    store = make_store("<p>one two three</p>")
    store.insert_citation(["r1"], 3)
    store.insert_citation(["r2"], 11)
    store.insert_citation(["r2", "r3"], 6)

    store.validate()
    assert len(store.citations()) == 2


@pytest.mark.parametrize(
    ("position", "prefix", "suffix"),
    [(5, "<p>Hello<span", "</span></p>"), (0, "<p><span", "</span>Hello</p>")],
)
def test_insert_at_paragraph_edge_stays_in_paragraph(make_store, position, prefix, suffix) -> None:
    """It should keep a citation typed at either end of a paragraph inside that paragraph."""

    store = make_store("<p>Hello</p>")

    store.insert_citation(["r1"], position)

    html = store.session.to_html()
    assert html.startswith(prefix)
    assert html.endswith(suffix)


def test_citation_data_leaves_markup_untouched(make_store) -> None:
    """It should write the document back unchanged after indexing."""

    html = "<p>a<br/><br/>b" + cite("a", ["r1"]) + "</p>"
    store = make_store(html)

    store.get_citation_data(1)

    assert store.session.to_html() == html
