"""Read-only lookups over stored entries and request statuses."""
import logging
from typing import Optional

from ingestion import internal_error, not_found
from providers import ProviderRegistry
from schemas import IngestionOutcome, chapter_type, series_type
from store import EntryStore

logger = logging.getLogger(__name__)


def ok(data) -> IngestionOutcome:
    return IngestionOutcome(status=200, status_text="OK", data=data)


class Catalog:
    """Answers read requests with the same outcome envelope as ingestion."""

    def __init__(self, store: EntryStore, providers: ProviderRegistry):
        self.store = store
        self.providers = providers

    def providers_list(self) -> IngestionOutcome:
        return ok(self.providers.names())

    def status(self, status_id: str) -> IngestionOutcome:
        try:
            status = self.store.get_status(status_id)
        except Exception as e:
            logger.exception(f"Failed to read status '{status_id}'")
            return internal_error(str(e))

        if status is None:
            return not_found(f"Cannot find '{status_id}' in the database")
        return ok(status.model_dump(mode="json"))

    def collection(self, provider: str, slug: Optional[str] = None) -> IngestionOutcome:
        """Series of a provider, or chapters of one of its series."""
        entry_type = chapter_type(provider, slug) if slug else series_type(provider)
        try:
            data = self.store.get_collection(entry_type)
        except Exception as e:
            logger.exception(f"Failed to read collection '{entry_type}'")
            return internal_error(str(e))

        if not data:
            return not_found(
                f"Cannot find data collection of '{slug or provider}' in the database"
            )
        return ok(data)

    def manga(self, provider: str, slug: str) -> IngestionOutcome:
        return self._entry(series_type(provider), slug)

    def chapter(self, provider: str, manga: str, slug: str) -> IngestionOutcome:
        return self._entry(chapter_type(provider, manga), slug)

    def _entry(self, entry_type: str, slug: str) -> IngestionOutcome:
        try:
            data = self.store.get_entry(entry_type, slug)
        except Exception as e:
            logger.exception(f"Failed to read entry '{entry_type}/{slug}'")
            return internal_error(str(e))

        if not data:
            return not_found(f"Cannot find data of '{slug}' in the database")
        return ok(data)
