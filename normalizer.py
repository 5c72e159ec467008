"""Slug derivation and text normalization utilities."""
import re
from typing import Optional
from urllib.parse import urlparse
import logging

from errors import SlugExtractionError

logger = logging.getLogger(__name__)


class SlugResolver:
    """
    Derive canonical slugs from provider URLs.

    ``https://luminousscans.com/series/1671234-solo-leveling/`` and
    ``https://luminousscans.com/series/solo-leveling`` both resolve to
    ``solo-leveling``.
    """

    # Numeric ID prefix some providers prepend to slugs
    ID_PREFIX = re.compile(r'^\d*-?')

    # Page filenames; dotted slugs like "dr.-stone" or "chapter-10.5" are not
    PAGE_FILENAME = re.compile(r'\.(html?|php)$', re.IGNORECASE)

    @classmethod
    def slug_of(cls, url: str) -> str:
        """
        Derive the slug of an entity URL.

        Args:
            url: Series or chapter URL

        Returns:
            Slug without numeric ID prefix

        Raises:
            SlugExtractionError: If the URL has no usable path segment
        """
        if not url or not url.strip():
            raise SlugExtractionError(url)

        path = urlparse(url.strip()).path
        segments = [segment for segment in path.split('/') if segment]

        # Trailing filename (e.g. index.html)
        if segments and cls.PAGE_FILENAME.search(segments[-1]):
            segments = segments[:-1]

        if not segments:
            raise SlugExtractionError(url)

        slug = cls.ID_PREFIX.sub('', segments[-1], count=1)
        if not slug:
            raise SlugExtractionError(url)

        return slug

    @classmethod
    def slug_or_none(cls, url: Optional[str]) -> Optional[str]:
        """Slug of a navigation URL. Empty URLs (first/last chapter) yield None."""
        if not url or not url.strip():
            return None
        return cls.slug_of(unescape_url(url))


def unescape_url(value: str) -> str:
    """Undo JSON-style slash escaping (``https:\\/\\/host\\/path``)."""
    return value.replace('\\/', '/').replace('\\', '')


def clean_text(text: Optional[str]) -> str:
    """Trim text and collapse runs of blank lines."""
    if not text:
        return ""
    return re.sub(r'\n{3,}', '\n\n', text).strip()


def collapse_chapter_number(raw: str) -> str:
    """
    Normalize a chapter number label.

    Some providers put the number and a sub-label on separate lines;
    keep only the last two lines, joined by a space.
    """
    text = raw.strip()
    if '\n' in text:
        lines = [line.strip() for line in text.split('\n')]
        text = ' '.join(lines[-2:])
    return text


def parse_order(raw: str):
    """Chapter ordering value as a number when numeric."""
    value = raw.strip()
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value
