"""Error taxonomy for the ingestion pipeline."""
from typing import Optional


class IngestionError(RuntimeError):
    """Base error for manga ingestion."""


class UnknownProvider(IngestionError):
    """Raised when a provider name is not registered."""

    def __init__(self, provider: str):
        super().__init__(f"Unknown provider '{provider}'")
        self.provider = provider


class ScrapeError(IngestionError):
    """Raised when a fetched document cannot be turned into records."""


class SlugExtractionError(ScrapeError):
    """Raised when no slug can be derived from a URL."""

    def __init__(self, url: str):
        super().__init__(f"Cannot derive a slug from '{url}'")
        self.url = url


class ExtractionError(ScrapeError):
    """Raised when a required node is missing from the document."""

    def __init__(self, field: str, detail: Optional[str] = None):
        message = f"Missing required field '{field}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.field = field


class CrawlError(IngestionError):
    """Raised when a page cannot be fetched. ``cause`` is the HTTP status, if any."""

    def __init__(self, message: str, cause: Optional[int] = None):
        super().__init__(message)
        self.cause = cause


class StorageError(IngestionError):
    """Raised when the store cannot be read or written."""
