"""CLI entrypoints for citeweaver."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from citeweaver.config import load_settings
from citeweaver.logging import configure_logging, get_logger
from citeweaver.models.citation import Position, Selection
from citeweaver.session import open_session
from citeweaver.store import CitationStore

app = typer.Typer(add_completion=False, help="Inline citation tracking for HTML documents")
logger = get_logger(__name__)

_BACKEND_HELP = "Document backend: 'tree' (edited in place) or 'value' (immutable)"


def _open(document: Path, backend: str | None) -> CitationStore:
    settings = load_settings()
    configure_logging(settings.log_level)
    if backend not in (None, "tree", "value"):
        raise typer.BadParameter(f"unknown backend {backend!r}", param_hint="--backend")
    html = document.read_text(encoding="utf-8")
    session = open_session(html, settings, backend=backend)  # type: ignore[arg-type]
    return CitationStore.load(session, settings=settings)


def _position(at: int, end: int | None) -> Position:
    if end is None:
        return at
    if end < at:
        raise typer.BadParameter("--end must not be before --at", param_hint="--end")
    return Selection(at, end)


def _write(store: CitationStore, document: Path, output: Path | None) -> Path:
    target = output or document
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(store.session.to_html(), encoding="utf-8")
    return target


@app.command()
def normalize(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML document"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of in place"),
    backend: str | None = typer.Option(None, "--backend", "-b", help=_BACKEND_HELP),
) -> None:
    """Migrate legacy citation markup and write the document back."""

    store = _open(document, backend)
    target = _write(store, document, output)
    typer.echo(str(target))


@app.command()
def insert(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML document"),
    item: list[str] = typer.Option(..., "--item", "-i", help="Reference id to cite (repeatable)"),
    at: int = typer.Option(..., "--at", help="Text offset of the cursor or selection start"),
    end: int | None = typer.Option(None, "--end", help="Selection end offset"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of in place"),
    backend: str | None = typer.Option(None, "--backend", "-b", help=_BACKEND_HELP),
) -> None:
    """Insert a citation, merging into an existing one where it touches."""

    store = _open(document, backend)
    citation_id = store.insert_citation(item, _position(at, end))
    target = _write(store, document, output)
    logger.info("Citation %s written to %s", citation_id, target)
    typer.echo(citation_id or "")


@app.command("index")
def index_cmd(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML document"),
    at: int = typer.Option(..., "--at", help="Text offset of the cursor or selection start"),
    end: int | None = typer.Option(None, "--end", help="Selection end offset"),
    backend: str | None = typer.Option(None, "--backend", "-b", help=_BACKEND_HELP),
) -> None:
    """Print the ordinal data of the citation at a position as JSON."""

    store = _open(document, backend)
    data = store.get_citation_data(_position(at, end))
    typer.echo(data.model_dump_json(by_alias=True))


@app.command("list")
def list_cmd(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML document"),
    backend: str | None = typer.Option(None, "--backend", "-b", help=_BACKEND_HELP),
) -> None:
    """Print every citation in reading order as JSON lines."""

    store = _open(document, backend)
    for citation in store.citations():
        typer.echo(json.dumps(citation.model_dump(mode="json"), ensure_ascii=False))


if __name__ == "__main__":
    app()
