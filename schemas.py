"""Pydantic schemas for scraped records and API request/response validation."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, List, Literal, Optional, Union
from datetime import datetime, timezone
from models import RequestState, RequestType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def series_type(provider: str) -> str:
    """Store partition of a provider's series."""
    return f"manga_{provider}"


def chapter_type(provider: str, series_slug: Optional[str] = None) -> str:
    """Store partition of a series' chapters."""
    if series_slug is None:
        return f"chapter_{provider}"
    return f"chapter_{provider}_{series_slug}"


# Record Schemas
class Record(BaseModel):
    """Fields shared by every scraped record."""
    type: str
    id: str
    scraped_at: datetime = Field(default_factory=utcnow)

    def to_entry(self) -> dict:
        """Serialize for the store."""
        return self.model_dump(mode="json")


class SeriesStub(Record):
    """Series as listed on a provider's series index."""
    phase: Literal["stub"] = "stub"
    title: str
    url: str


class SeriesFull(Record):
    """Series as described on its own page."""
    phase: Literal["full"] = "full"
    title: str
    synopsis: str
    cover: str
    short_url: Optional[str] = None
    canonical_url: str


class ChapterStub(Record):
    """Chapter as listed on its series page."""
    phase: Literal["stub"] = "stub"
    number: str
    url: str
    order: Union[int, float, str]
    date: Optional[str] = None


class ChapterFull(Record):
    """Chapter as read on its reader page."""
    phase: Literal["full"] = "full"
    title: str
    short_url: Optional[str] = None
    canonical_url: str
    prev_slug: Optional[str] = None
    next_slug: Optional[str] = None
    content: List[str]


def is_sealed(entry: Optional[dict]) -> bool:
    """A record that already holds its detail fields cannot be enriched again."""
    return bool(entry) and entry.get("phase") == "full"


# Status Schemas
class StatusRecord(BaseModel):
    """Lifecycle of a batch request."""
    id: str
    request_type: Optional[RequestType] = None
    state: RequestState = RequestState.PENDING
    failed_items: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Ingestion Schemas
class MangaListRequest(BaseModel):
    """Request to scrape a provider's series index."""
    provider: str = Field(..., description="Registered provider name")


class MangaRequest(BaseModel):
    """Request to scrape the detail page of a listed series."""
    provider: str
    slug: str = Field(..., description="Series slug")


class ChapterListRequest(BaseModel):
    """Request to scrape the chapter list of a listed series."""
    provider: str
    slug: str = Field(..., description="Series slug")


class ChapterRequest(BaseModel):
    """Request to scrape the reader page of a listed chapter."""
    provider: str
    manga: str = Field(..., description="Series slug")
    slug: str = Field(..., description="Chapter slug")


class IngestionRequest(BaseModel):
    """Any scrape request, tagged with its kind. Used by the queue and CLI."""
    request_type: RequestType
    provider: str
    slug: Optional[str] = None
    manga: Optional[str] = None


class IngestionOutcome(BaseModel):
    """Result of an ingestion or catalog request, rendered as the HTTP response."""
    status: int
    status_text: str
    data: Optional[Any] = None


class QueuedResponse(BaseModel):
    """Response after enqueueing an ingestion request."""
    job_id: str
    request: IngestionRequest
    message: str
