"""Shared fixtures and document builders."""

from __future__ import annotations

import json
from typing import Callable

import pytest

from citeweaver.config import Settings
from citeweaver.session import DocumentSession, open_session

BACKENDS = ["tree", "value"]
FORMAT = "abt/citation"


def cite(citation_id: str, items: list, text: str = "[1]") -> str:
    """Citation span markup as stored in documents."""

    return (
        f"<span class=\"abt-citation\" id=\"{citation_id}\" "
        f"data-items='{json.dumps(items)}' data-editable=\"true\">{text}</span>"
    )


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture(params=BACKENDS)
def backend(request: pytest.FixtureRequest) -> str:
    return request.param


@pytest.fixture
def make_session(settings: Settings, backend: str) -> Callable[[str], DocumentSession]:
    def _make(html: str) -> DocumentSession:
        return open_session(html, settings, backend=backend)  # type: ignore[arg-type]

    return _make
