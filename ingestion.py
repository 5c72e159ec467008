"""
Ingestion orchestration.

Two flows turn scraped records into stored entries:

* Batch (MangaList, ChapterList): a status record is created as
  ``pending``, the list page is scraped, every item not yet stored is
  created as a stub, items already stored are reported in
  ``failed_items``, and the status becomes ``completed``.
* Singleton (Manga, Chapter): an existing stub is enriched with its
  detail page, at most once. A stub that already holds its detail
  fields is sealed and answers Conflict.

Both flows run to completion within one call. A scrape failure during a
batch leaves its status ``pending``; nothing reconciles it.
"""
import logging
from typing import Callable, Optional

from crawler.scraper import Scraper, ScrapeFailure
from errors import UnknownProvider
from models import RequestState, RequestType
from providers import ProviderRegistry
from schemas import (
    IngestionOutcome, IngestionRequest, StatusRecord,
    chapter_type, is_sealed, series_type,
)
from store import EntryStore

logger = logging.getLogger(__name__)


def accepted(data) -> IngestionOutcome:
    return IngestionOutcome(status=202, status_text="Accepted", data=data)


def created(data) -> IngestionOutcome:
    return IngestionOutcome(status=201, status_text="Created", data=data)


def not_found(message: str) -> IngestionOutcome:
    return IngestionOutcome(status=404, status_text=message)


def conflict(message: str) -> IngestionOutcome:
    return IngestionOutcome(status=409, status_text=message)


def internal_error(message: str) -> IngestionOutcome:
    return IngestionOutcome(status=500, status_text=message)


def scrape_failed(failure: ScrapeFailure) -> IngestionOutcome:
    """Outcome of a failed scrape; the crawl cause picks the status code."""
    return IngestionOutcome(status=failure.cause or 404, status_text=failure.message)


def batch_status_id(provider: str, series_slug: Optional[str] = None) -> str:
    """Status id of a series-list job (provider) or chapter-list job (provider + series)."""
    if series_slug is None:
        return provider
    return f"{provider}_{series_slug}"


class IngestionOrchestrator:
    """
    Drives scrape requests into the store.

    Expected failures come back from the scraper as values and pick the
    outcome code; storage and other unexpected errors are caught here and
    answered with an internal error.
    """

    def __init__(
            self,
            store: EntryStore,
            scraper: Scraper,
            providers: ProviderRegistry,
    ):
        self.store = store
        self.scraper = scraper
        self.providers = providers

    # ------------------------------------------------------------------
    # Batch flows
    # ------------------------------------------------------------------

    def ingest_manga_list(self, provider: str) -> IngestionOutcome:
        """Create stubs for every series on a provider's index."""
        def flow():
            url = self.providers.resolve(provider).list_url
            return self._run_batch(
                RequestType.MANGA_LIST, provider, url, batch_status_id(provider)
            )

        return self._guarded(f"MangaList {provider}", flow)

    def ingest_chapter_list(self, provider: str, slug: str) -> IngestionOutcome:
        """Create stubs for every chapter of a listed series."""
        def flow():
            self.providers.resolve(provider)
            series = self.store.get_entry(series_type(provider), slug)
            if not series:
                logger.info(f"ChapterList {provider}/{slug}: series not found")
                return not_found(f"Cannot find '{slug}' in the database")

            return self._run_batch(
                RequestType.CHAPTER_LIST, provider, series['url'],
                batch_status_id(provider, slug),
            )

        return self._guarded(f"ChapterList {provider}/{slug}", flow)

    def _run_batch(
            self,
            request_type: RequestType,
            provider: str,
            url: str,
            status_id: str,
    ) -> IngestionOutcome:
        status = self.store.create_status(
            StatusRecord(id=status_id, request_type=request_type, state=RequestState.PENDING)
        )
        logger.info(f"Created status '{status_id}' ({request_type.value}) as pending")

        result = self.scraper.run(url, request_type, provider)
        if isinstance(result, ScrapeFailure):
            logger.warning(f"Status '{status_id}' left pending: {result.message}")
            return scrape_failed(result)

        failed_items = []
        created_count = 0

        # Sequential: failed_items keeps the extraction order
        for record in result.records:
            if self.store.get_entry(record.type, record.id):
                failed_items.append(record.id)
                continue
            self.store.create_entry(record.to_entry())
            created_count += 1

        status.state = RequestState.COMPLETED
        status.failed_items = failed_items
        status = self.store.update_status(status)

        logger.info(
            f"Status '{status_id}' completed: "
            f"{created_count} created, {len(failed_items)} already stored"
        )

        return accepted({
            "items": [record.to_entry() for record in result.records],
            "status": status.model_dump(mode="json"),
        })

    # ------------------------------------------------------------------
    # Singleton flows
    # ------------------------------------------------------------------

    def ingest_manga(self, provider: str, slug: str) -> IngestionOutcome:
        """Enrich a series stub with its detail page."""
        return self._guarded(
            f"Manga {provider}/{slug}",
            lambda: self._run_singleton(
                RequestType.MANGA, provider, series_type(provider), slug
            ),
        )

    def ingest_chapter(self, provider: str, manga: str, slug: str) -> IngestionOutcome:
        """Enrich a chapter stub with its reader page."""
        return self._guarded(
            f"Chapter {provider}/{manga}/{slug}",
            lambda: self._run_singleton(
                RequestType.CHAPTER, provider, chapter_type(provider, manga), slug
            ),
        )

    def _run_singleton(
            self,
            request_type: RequestType,
            provider: str,
            entry_type: str,
            slug: str,
    ) -> IngestionOutcome:
        self.providers.resolve(provider)

        entry = self.store.get_entry(entry_type, slug)
        if not entry:
            logger.info(f"{request_type.value} {entry_type}/{slug}: not found")
            return not_found(f"Cannot find '{slug}' in the database")

        if is_sealed(entry):
            logger.info(f"{request_type.value} {entry_type}/{slug}: already complete")
            return conflict(f"Full data of '{slug}' already exists in the database")

        result = self.scraper.run(entry['url'], request_type, provider)
        if isinstance(result, ScrapeFailure):
            return scrape_failed(result)

        # Stub keeps its key; detail fields are added or overwritten
        patch = result.record.to_entry()
        patch.pop('type')
        patch.pop('id')

        merged = self.store.update_entry(entry_type, slug, patch)
        logger.info(f"{request_type.value} {entry_type}/{slug}: enriched")
        return created(merged)

    # ------------------------------------------------------------------

    def dispatch(self, request: IngestionRequest) -> IngestionOutcome:
        """Route a tagged request to its flow."""
        request_type = RequestType(request.request_type)

        if request_type == RequestType.MANGA_LIST:
            return self.ingest_manga_list(request.provider)

        if not request.slug:
            return IngestionOutcome(status=400, status_text="Missing 'slug'")

        if request_type == RequestType.MANGA:
            return self.ingest_manga(request.provider, request.slug)
        if request_type == RequestType.CHAPTER_LIST:
            return self.ingest_chapter_list(request.provider, request.slug)

        if not request.manga:
            return IngestionOutcome(status=400, status_text="Missing 'manga'")
        return self.ingest_chapter(request.provider, request.manga, request.slug)

    def _guarded(self, label: str, flow: Callable[[], IngestionOutcome]) -> IngestionOutcome:
        try:
            return flow()
        except UnknownProvider as e:
            logger.warning(f"{label}: {e}")
            return not_found(str(e))
        except Exception as e:
            logger.exception(f"{label}: unexpected error")
            return internal_error(str(e))
