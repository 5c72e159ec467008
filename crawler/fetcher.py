"""Page fetching."""
import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from config import settings
from errors import CrawlError

logger = logging.getLogger(__name__)


class Crawler(ABC):
    """Fetches the HTML of a page."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """
        Fetch a page.

        Args:
            url: Page URL

        Returns:
            HTML source of the page

        Raises:
            CrawlError: If the page cannot be fetched
        """


class HttpCrawler(Crawler):
    """
    Crawler over plain HTTP.

    One attempt per request; a non-2xx response is a failure carrying
    the response status as its cause.
    """

    def __init__(
            self,
            session: Optional[requests.Session] = None,
            user_agent: Optional[str] = None,
            timeout: Optional[float] = None,
    ):
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en",
            "User-Agent": user_agent or settings.crawler_user_agent,
        })
        self.timeout = timeout or settings.crawler_timeout

    def fetch(self, url: str) -> str:
        logger.debug(f"Fetching {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request to '{url}' failed: {e}")
            raise CrawlError(f"Failed to crawl '{url}': {e}") from e

        if not response.ok:
            logger.error(f"Crawl of '{url}' returned HTTP {response.status_code}")
            raise CrawlError(f"Failed to crawl '{url}'", cause=response.status_code)

        return response.text
