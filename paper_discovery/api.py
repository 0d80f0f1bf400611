"""FastAPI edge endpoint for paper discovery and bibliography export."""

import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from .citations import to_bibtex, to_ris
from .config import create_discovery_service, load_config
from .errors import ClientInputError, DiscoveryError, TotalUnavailable
from .paper_sources import PaperDiscoveryService, PaperRecord

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[], PaperDiscoveryService]


class SearchRequest(BaseModel):
    """Body of POST /search-papers."""

    topic: str | None = None


class ExportRequest(BaseModel):
    """Body of the export endpoints."""

    papers: list[PaperRecord] = Field(default_factory=list)


def _default_service() -> PaperDiscoveryService:
    return create_discovery_service(load_config())


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def get_service(request: Request) -> PaperDiscoveryService:
    """Dependency returning the service created at startup."""
    return request.app.state.discovery_service


def create_app(service_factory: ServiceFactory | None = None) -> FastAPI:
    """Build the API. ``service_factory`` is called once at startup."""
    factory = service_factory or _default_service

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        service = factory()
        async with service:
            app.state.discovery_service = service
            logger.info("Paper discovery service started")
            yield
        logger.info("Paper discovery service stopped")

    app = FastAPI(title="Paper Discovery API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError):
        logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
        return _error(400, "Malformed request body")

    @app.exception_handler(ClientInputError)
    async def _client_error(request: Request, exc: ClientInputError):
        return _error(400, str(exc))

    @app.exception_handler(TotalUnavailable)
    async def _unavailable(request: Request, exc: TotalUnavailable):
        return _error(503, str(exc))

    @app.exception_handler(DiscoveryError)
    async def _discovery_error(request: Request, exc: DiscoveryError):
        logger.error(f"search-papers error: {exc}")
        return _error(500, str(exc))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return _error(500, str(exc) or exc.__class__.__name__)

    @app.post("/search-papers")
    async def search_papers(
        body: SearchRequest,
        service: PaperDiscoveryService = Depends(get_service),
    ):
        result = await service.discover(body.topic)
        return result.to_payload()

    @app.post("/export/ris")
    async def export_ris(body: ExportRequest):
        return PlainTextResponse(
            to_ris(body.papers),
            headers={"Content-Disposition": 'attachment; filename="references.ris"'},
        )

    @app.post("/export/bibtex")
    async def export_bibtex(body: ExportRequest):
        return PlainTextResponse(
            to_bibtex(body.papers),
            headers={"Content-Disposition": 'attachment; filename="references.bib"'},
        )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
