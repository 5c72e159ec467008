"""Crawl a page and extract its records."""
import logging
from typing import List, Optional, Union

from pydantic import BaseModel

from crawler.extractors import EXTRACTORS, parse_html
from crawler.fetcher import Crawler, HttpCrawler
from errors import CrawlError, ScrapeError
from models import RequestType
from schemas import ChapterFull, ChapterStub, SeriesFull, SeriesStub

logger = logging.getLogger(__name__)

ScrapedRecord = Union[SeriesStub, SeriesFull, ChapterStub, ChapterFull]


class ScrapeSuccess(BaseModel):
    """Records extracted from a page. Single-record kinds hold one record."""
    request_type: RequestType
    url: str
    records: List[ScrapedRecord]

    @property
    def record(self) -> ScrapedRecord:
        return self.records[0]


class ScrapeFailure(BaseModel):
    """
    A page that could not be turned into records.

    ``cause`` is the HTTP status of a failed crawl; it is None for
    transport and extraction failures.
    """
    request_type: RequestType
    url: str
    message: str
    cause: Optional[int] = None


ScrapeResult = Union[ScrapeSuccess, ScrapeFailure]


class Scraper:
    """
    Crawl + extract service.

    Expected failures (crawl errors, missing nodes, unusable URLs) are
    returned as ``ScrapeFailure`` values; anything else propagates.
    """

    def __init__(self, crawler: Optional[Crawler] = None):
        self.crawler = crawler or HttpCrawler()

    def run(self, url: str, request_type: RequestType, provider: str) -> ScrapeResult:
        """
        Scrape a page.

        Args:
            url: Page to crawl
            request_type: Which extractor to apply
            provider: Provider name, used in record types and quirks

        Returns:
            ScrapeSuccess with the extracted records, or ScrapeFailure
        """
        request_type = RequestType(request_type)
        extractor = EXTRACTORS[request_type]

        try:
            html = self.crawler.fetch(url)
            extracted = extractor(parse_html(html), provider)
        except CrawlError as e:
            logger.error(f"Scraper fail: {request_type.value} - {url} ({e})")
            return ScrapeFailure(request_type=request_type, url=url, message=str(e), cause=e.cause)
        except ScrapeError as e:
            logger.error(f"Scraper fail: {request_type.value} - {url} ({e})")
            return ScrapeFailure(request_type=request_type, url=url, message=str(e))

        records = extracted if isinstance(extracted, list) else [extracted]
        logger.debug(f"Scraper success: {request_type.value} - {url} ({len(records)} records)")
        return ScrapeSuccess(request_type=request_type, url=url, records=records)
