"""FastAPI application - main entry point."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Depends
from fastapi.responses import JSONResponse

from catalog import Catalog
from crawler.scraper import Scraper
from database import init_db
from ingestion import IngestionOrchestrator
from ingestion_queue import IngestionQueue
from providers import ProviderRegistry
from schemas import (
    ChapterListRequest, ChapterRequest, IngestionOutcome, IngestionRequest,
    MangaListRequest, MangaRequest, QueuedResponse,
)
from store import SqlStore
from config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Create FastAPI app
app = FastAPI(
    title="Manga Ingestion API",
    description="Backend API for scraping manga providers into the catalog",
    version="1.0.0",
    lifespan=lifespan,
)

# Built once at startup
provider_registry = ProviderRegistry.from_settings()


def get_orchestrator() -> IngestionOrchestrator:
    return IngestionOrchestrator(
        store=SqlStore(),
        scraper=Scraper(),
        providers=provider_registry,
    )


def get_catalog() -> Catalog:
    return Catalog(store=SqlStore(), providers=provider_registry)


def get_queue() -> IngestionQueue:
    return IngestionQueue()


def respond(outcome: IngestionOutcome) -> JSONResponse:
    """Render an outcome with its own status code."""
    return JSONResponse(
        status_code=outcome.status,
        content=outcome.model_dump(mode="json", exclude_none=True),
    )


# ============================================================================
# Scrape Endpoints
# ============================================================================

@app.post("/scrape/manga-list", response_model=IngestionOutcome, tags=["Scrape"])
def scrape_manga_list(
    request: MangaListRequest,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator)
):
    """
    Scrape a provider's series index.

    Creates a stub for every series not yet stored. Series already stored
    are listed in the status record's ``failed_items``.
    """
    return respond(orchestrator.ingest_manga_list(request.provider))


@app.post("/scrape/manga", response_model=IngestionOutcome, tags=["Scrape"])
def scrape_manga(
    request: MangaRequest,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator)
):
    """Enrich a listed series with its detail page."""
    return respond(orchestrator.ingest_manga(request.provider, request.slug))


@app.post("/scrape/chapter-list", response_model=IngestionOutcome, tags=["Scrape"])
def scrape_chapter_list(
    request: ChapterListRequest,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator)
):
    """Create stubs for the chapters of a listed series."""
    return respond(orchestrator.ingest_chapter_list(request.provider, request.slug))


@app.post("/scrape/chapter", response_model=IngestionOutcome, tags=["Scrape"])
def scrape_chapter(
    request: ChapterRequest,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator)
):
    """Enrich a listed chapter with its reader page."""
    return respond(
        orchestrator.ingest_chapter(request.provider, request.manga, request.slug)
    )


@app.post("/queue", response_model=QueuedResponse, status_code=202, tags=["Scrape"])
def enqueue_scrape(
    request: IngestionRequest,
    queue: IngestionQueue = Depends(get_queue)
):
    """
    Queue a scrape request for a background worker.

    Returns immediately without waiting for the scrape to run.
    """
    job_id = queue.enqueue_request(request)
    return QueuedResponse(
        job_id=job_id,
        request=request,
        message="Scrape request queued"
    )


# ============================================================================
# Read Endpoints
# ============================================================================

@app.get("/status/{status_id}", response_model=IngestionOutcome, tags=["Catalog"])
def get_status(status_id: str, catalog: Catalog = Depends(get_catalog)):
    """Get status of a batch scrape request."""
    return respond(catalog.status(status_id))


@app.get("/providers", response_model=IngestionOutcome, tags=["Catalog"])
def list_providers(catalog: Catalog = Depends(get_catalog)):
    """List supported providers."""
    return respond(catalog.providers_list())


@app.get("/list/{provider}", response_model=IngestionOutcome, tags=["Catalog"])
def list_series(provider: str, catalog: Catalog = Depends(get_catalog)):
    """List stored series of a provider."""
    return respond(catalog.collection(provider))


@app.get("/list/{provider}/{slug}", response_model=IngestionOutcome, tags=["Catalog"])
def list_chapters(provider: str, slug: str, catalog: Catalog = Depends(get_catalog)):
    """List stored chapters of a series."""
    return respond(catalog.collection(provider, slug))


@app.get("/manga/{provider}/{slug}", response_model=IngestionOutcome, tags=["Catalog"])
def get_manga(provider: str, slug: str, catalog: Catalog = Depends(get_catalog)):
    """Get a stored series."""
    return respond(catalog.manga(provider, slug))


@app.get("/chapter/{provider}/{manga}/{slug}", response_model=IngestionOutcome, tags=["Catalog"])
def get_chapter(provider: str, manga: str, slug: str, catalog: Catalog = Depends(get_catalog)):
    """Get a stored chapter."""
    return respond(catalog.chapter(provider, manga, slug))


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "manga-ingestion"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
