"""FastAPI app exposing citation operations over HTML documents."""

from __future__ import annotations

from typing import Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from citeweaver.config import Settings, load_settings
from citeweaver.errors import CiteweaverError, InvalidPositionError
from citeweaver.logging import configure_logging, get_logger, log_exception
from citeweaver.models.citation import CitationData, CitationFormat, ItemId, Position, Selection
from citeweaver.models.csl import CitationCluster
from citeweaver.session import DocumentSession, open_session
from citeweaver.store import CitationStore


class DocumentRequest(BaseModel):
    """A document to operate on."""

    html: str
    backend: Literal["tree", "value"] | None = None


class PositionedRequest(DocumentRequest):
    position: int = Field(ge=0)
    selection_end: int | None = Field(default=None, ge=0)

    def target(self) -> Position:
        if self.selection_end is None:
            return self.position
        return Selection(self.position, self.selection_end)


class InsertRequest(PositionedRequest):
    items: list[ItemId] = Field(default_factory=list)


class DocumentResponse(BaseModel):
    html: str
    citation_id: str | None = None
    migrated: int = 0


class CitationListResponse(BaseModel):
    citations: list[CitationFormat]
    cited_items: list[ItemId]


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI app."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)

    app = FastAPI(title="citeweaver", version="0.1.0")

    def open_document(req: DocumentRequest) -> DocumentSession:
        if len(req.html) > settings.api_max_document_chars:
            raise HTTPException(status_code=413, detail="document too large")
        return open_session(req.html, settings, backend=req.backend)

    def load(req: DocumentRequest) -> CitationStore:
        return CitationStore.load(open_document(req), settings=settings)

    def target(req: PositionedRequest) -> Position:
        try:
            return req.target()
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/citations/normalize")
    def normalize(req: DocumentRequest) -> DocumentResponse:
        session = open_document(req)
        store = CitationStore(session, settings=settings)
        migrated = store.normalize()
        return DocumentResponse(html=session.to_html(), migrated=migrated)

    @app.post("/citations/insert")
    def insert(req: InsertRequest) -> DocumentResponse:
        logger.info("API insert requested", extra={"items": len(req.items)})
        store = load(req)
        try:
            citation_id = store.insert_citation(req.items, target(req))
        except InvalidPositionError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return DocumentResponse(html=store.session.to_html(), citation_id=citation_id)

    @app.post("/citations/data", response_model=CitationData, response_model_by_alias=True)
    def data(req: PositionedRequest) -> CitationData:
        store = load(req)
        try:
            return store.get_citation_data(target(req))
        except InvalidPositionError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        except CiteweaverError as e:
            log_exception(logger, "Citation data failed", position=req.position)
            raise HTTPException(status_code=500, detail=str(e)) from e

    @app.post("/citations/cluster", response_model=CitationCluster, response_model_by_alias=True)
    def cluster(req: InsertRequest) -> CitationCluster:
        store = load(req)
        try:
            return store.citation_cluster(target(req), req.items)
        except InvalidPositionError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

    @app.post("/citations/list")
    def list_citations(req: DocumentRequest) -> CitationListResponse:
        store = load(req)
        return CitationListResponse(citations=store.citations(), cited_items=store.cited_items())

    return app
