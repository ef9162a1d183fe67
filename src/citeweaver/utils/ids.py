"""ID utilities."""

from __future__ import annotations

import itertools
import uuid
from typing import Callable


def new_citation_id(prefix: str = "cite-") -> str:
    """Mint a random citation id.

    uuid4 keeps the collision probability negligible, so ids are never checked against
    the document when they are created.
    """

    return f"{prefix}{uuid.uuid4().hex}"


def random_id_factory(prefix: str = "cite-") -> Callable[[], str]:
    return lambda: new_citation_id(prefix)


def sequential_id_factory(prefix: str = "cite-", start: int = 1) -> Callable[[], str]:
    """Return a factory of consecutive ids like `cite-0001`.

    Only collision-free within a single fresh document; meant for fixtures and demos.
    """

    counter = itertools.count(start)
    return lambda: f"{prefix}{next(counter):04d}"
