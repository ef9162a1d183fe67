"""Tests for the FastAPI surface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from citeweaver.api.app import create_app
from citeweaver.config import Settings

from conftest import cite

THREE = (
    "<p>A" + cite("a", ["r1"]) + " B" + cite("b", ["r2"], text="[2]")
    + " C" + cite("c", ["r3"], text="[3]") + "</p>"
)


def _client(**overrides) -> TestClient:
    return TestClient(create_app(Settings(**overrides)))


def test_health() -> None:
    """It should answer the health probe."""

    assert _client().get("/health").json() == {"status": "ok"}


def test_insert_returns_updated_document() -> None:
    """It should insert a citation and return the new markup."""

    resp = _client().post(
        "/citations/insert",
        json={"html": "<p>Hello world</p>", "items": ["r1"], "position": 5, "backend": "value"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["citation_id"]
    assert body["citation_id"] in body["html"]


def test_citation_data_endpoint() -> None:
    """It should return ordinal data using wire aliases."""

    resp = _client().post("/citations/data", json={"html": THREE, "position": 7})

    assert resp.status_code == 200
    assert resp.json() == {
        "currentIndex": 1,
        "locations": {"before": [["a", 0]], "after": [["c", 0]]},
    }


def test_cluster_endpoint() -> None:
    """It should return a citeproc payload for the selected citation."""

    resp = _client().post(
        "/citations/cluster",
        json={"html": THREE, "position": 6, "selection_end": 9},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["citation"]["citationID"] == "b"
    assert body["citationsPre"] == [["a", 0]]


def test_list_and_normalize_endpoints() -> None:
    """It should normalize legacy markup and list citations."""

    legacy = "<span class=\"abt-citation\" id=\"old\" data-reflist='[\"r1\"]'>[1]</span>"
    client = _client()

    normalized = client.post("/citations/normalize", json={"html": legacy}).json()
    assert normalized["migrated"] == 1

    listed = client.post("/citations/list", json={"html": normalized["html"]}).json()
    assert listed["citations"] == [{"id": "old", "items": ["r1"], "editable": True}]
    assert listed["cited_items"] == ["r1"]


def test_rejects_bad_input() -> None:
    """It should map bad positions and oversized documents to client errors."""

    client = _client(api_max_document_chars=1_000)

    bad = client.post("/citations/data", json={"html": "<p>x</p>", "position": 9})
    assert bad.status_code == 422

    reversed_sel = client.post(
        "/citations/data", json={"html": "<p>xyz</p>", "position": 2, "selection_end": 1}
    )
    assert reversed_sel.status_code == 422

    big = client.post("/citations/list", json={"html": "x" * 1_001})
    assert big.status_code == 413


def test_normalize_enforces_document_size() -> None:
    """It should refuse oversized documents on the normalize endpoint too."""

    resp = _client(api_max_document_chars=1_000).post("/citations/normalize", json={"html": "x" * 1_001})

    assert resp.status_code == 413
