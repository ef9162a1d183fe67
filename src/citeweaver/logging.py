"""Logging utilities.

Log lines carry the document session and the citation operation they belong to, so
interleaved edits from the API can be told apart.
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.logging import RichHandler


_session_var: contextvars.ContextVar[str] = contextvars.ContextVar("citeweaver_session", default="-")
_op_var: contextvars.ContextVar[str] = contextvars.ContextVar("citeweaver_op", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s session=%(session)s op=%(op)s %(name)s: %(message)s"


class _SessionFilter(logging.Filter):
    """Stamp records with the active document session and operation."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.session = _session_var.get()  # type: ignore[attr-defined]
        record.op = _op_var.get()  # type: ignore[attr-defined]
        return True


_SESSION_FILTER = _SessionFilter()


@contextlib.contextmanager
def session_context(*, session_id: str | None = None, op: str | None = None) -> Any:
    """Bind a document session and operation to every record logged inside the block.

    Nested blocks inherit whatever they do not override, so a store operation running
    inside an API request keeps the request's session id.
    """

    token_session = _session_var.set(session_id or _session_var.get())
    token_op = _op_var.set(op or _op_var.get())
    try:
        yield
    finally:
        _session_var.reset(token_session)
        _op_var.reset(token_op)


def current_context() -> dict[str, str]:
    return {"session": _session_var.get(), "op": _op_var.get()}


def configure_logging(level: str = "INFO") -> None:
    """Install the rich console handler on the root logger.

    Safe to call repeatedly (every CLI command and every API app does); later calls only
    change the level.

    Args:
        level: Logging level name.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if any(_SESSION_FILTER in h.filters for h in root.handlers):
        return

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_SESSION_FILTER)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log the active exception with the session context and any extra fields."""

    logger.exception("%s | context=%s", msg, {**current_context(), **context})
