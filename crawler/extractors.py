"""
Record extraction from provider pages.

Each extractor takes a parsed page and a provider name and returns
canonical records. Extractors are pure: the same document always yields
the same records (apart from ``scraped_at``). A required node that is
missing raises ``ExtractionError`` instead of producing a partial record.

Where providers differ, the lookup is an ordered tuple of strategies;
the first one with a non-empty result wins.
"""
import re
from typing import Callable, Dict, List, Optional, Sequence, Union

from scrapy import Selector

from errors import ExtractionError
from models import RequestType
from normalizer import (
    SlugResolver, clean_text, collapse_chapter_number, parse_order,
)
from schemas import (
    ChapterFull, ChapterStub, SeriesFull, SeriesStub,
    chapter_type, series_type,
)

Strategy = Callable[[Selector], Union[str, List[str], None]]

NAV_URL_PATTERN = r"""['"]{field}['"]\s*:\s*['"](.*?)['"]"""


def parse_html(html: str) -> Selector:
    """Parse an HTML page into a queryable document."""
    return Selector(text=html)


def _text(selection) -> str:
    """Full text of the first matched node, trimmed."""
    value = selection.xpath('string()').get()
    return value.strip() if value else ""


def _required(value, field: str):
    if not value:
        raise ExtractionError(field)
    return value


def first_non_empty(strategies: Sequence[Strategy], doc: Selector):
    """Run strategies in order and return the first non-empty result."""
    for strategy in strategies:
        result = strategy(doc)
        if result:
            return result
    return None


# Fallback strategies

def _canonical_link(doc: Selector) -> Optional[str]:
    return doc.css('link[rel="canonical"]::attr(href)').get()


def _og_url(doc: Selector) -> Optional[str]:
    return doc.css('meta[property="og:url"]::attr(content)').get()


def _synopsis_paragraph(doc: Selector) -> str:
    return _text(doc.css('div.entry-content p'))


def _synopsis_body(doc: Selector) -> str:
    return _text(doc.css('div.entry-content'))


def _reader_images(doc: Selector) -> List[str]:
    return doc.css('div#readerarea img[class*="wp-image"]::attr(src)').getall()


def _nested_reader_images(doc: Selector) -> List[str]:
    # The reader holds its markup as text; parse it a second time
    inner = doc.css('div#readerarea').xpath('string()').get()
    if not inner or not inner.strip():
        return []
    return Selector(text=inner).css('img[class*="wp-image"]::attr(src)').getall()


def _full_size_images(doc: Selector) -> List[str]:
    return doc.css('div#readerarea img[class*="size-full"]::attr(src)').getall()


SERIES_CANONICAL_STRATEGIES = (_canonical_link,)
CHAPTER_CANONICAL_STRATEGIES = (_canonical_link, _og_url)
SYNOPSIS_STRATEGIES = (_synopsis_paragraph, _synopsis_body)

DEFAULT_CONTENT_STRATEGIES = (_reader_images, _full_size_images)
CONTENT_STRATEGIES: Dict[str, Sequence[Strategy]] = {
    'realm': (_nested_reader_images, _full_size_images),
}


# Extractors

def extract_manga_list(doc: Selector, provider: str) -> List[SeriesStub]:
    """
    Extract series stubs from a provider's series index.

    Duplicate slugs collapse: the last anchor wins, at the position of
    the first one.
    """
    series: Dict[str, SeriesStub] = {}

    for anchor in doc.css('div.soralist a.series'):
        title = _required(_text(anchor), 'title')
        url = _required(anchor.attrib.get('href'), 'url')
        slug = SlugResolver.slug_of(url)

        series[slug] = SeriesStub(
            type=series_type(provider),
            id=slug,
            title=title,
            url=url,
        )

    return list(series.values())


def extract_manga(doc: Selector, provider: str) -> SeriesFull:
    """Extract the full series record from its detail page."""
    title = _required(_text(doc.css('h1.entry-title')), 'title')

    if not doc.css('div.entry-content'):
        raise ExtractionError('synopsis')
    synopsis = clean_text(first_non_empty(SYNOPSIS_STRATEGIES, doc))

    cover = _required(doc.css('div.thumb img::attr(src)').get(), 'cover')
    short_url = doc.css('link[rel="shortlink"]::attr(href)').get()
    canonical_url = _required(
        first_non_empty(SERIES_CANONICAL_STRATEGIES, doc), 'canonical_url'
    )

    return SeriesFull(
        type=series_type(provider),
        id=SlugResolver.slug_of(canonical_url),
        title=title,
        synopsis=synopsis,
        cover=cover,
        short_url=short_url,
        canonical_url=canonical_url,
    )


def extract_chapter_list(doc: Selector, provider: str) -> List[ChapterStub]:
    """Extract chapter stubs from a series page."""
    canonical_url = _required(_canonical_link(doc), 'canonical_url')
    series_slug = SlugResolver.slug_of(canonical_url)
    entry_type = chapter_type(provider, series_slug)

    chapters: Dict[str, ChapterStub] = {}

    for anchor in doc.css('div.eplister a'):
        url = _required(anchor.attrib.get('href'), 'url')
        number = _required(
            collapse_chapter_number(anchor.css('span.chapternum').xpath('string()').get('')),
            'number',
        )
        order = _required(anchor.xpath('ancestor::li[1]/@data-num').get(), 'order')
        date = _text(anchor.css('span.chapterdate')) or None
        slug = SlugResolver.slug_of(url)

        chapters[slug] = ChapterStub(
            type=entry_type,
            id=slug,
            number=number,
            url=url,
            order=parse_order(order),
            date=date,
        )

    return list(chapters.values())


def _nav_slug(script: str, field: str) -> Optional[str]:
    match = re.search(NAV_URL_PATTERN.format(field=field), script)
    if not match:
        raise ExtractionError(field, "not found in reader script")
    return SlugResolver.slug_or_none(match.group(1))


def extract_chapter(doc: Selector, provider: str) -> ChapterFull:
    """Extract the full chapter record from its reader page."""
    title = _required(_text(doc.css('h1.entry-title')), 'title')
    short_url = doc.css('link[rel="shortlink"]::attr(href)').get()
    canonical_url = _required(
        first_non_empty(CHAPTER_CANONICAL_STRATEGIES, doc), 'canonical_url'
    )

    script = _required(
        doc.xpath('//script[contains(text(), "ts_reader.run")]/text()').get(),
        'reader_script',
    )
    prev_slug = _nav_slug(script, 'prevUrl')
    next_slug = _nav_slug(script, 'nextUrl')

    if not doc.css('div#readerarea'):
        raise ExtractionError('content', "reader container not found")
    strategies = CONTENT_STRATEGIES.get(provider, DEFAULT_CONTENT_STRATEGIES)
    images = _required(first_non_empty(strategies, doc), 'content')

    return ChapterFull(
        type=chapter_type(provider),
        id=SlugResolver.slug_of(canonical_url),
        title=title,
        short_url=short_url,
        canonical_url=canonical_url,
        prev_slug=prev_slug,
        next_slug=next_slug,
        content=list(dict.fromkeys(images)),
    )


EXTRACTORS = {
    RequestType.MANGA_LIST: extract_manga_list,
    RequestType.MANGA: extract_manga,
    RequestType.CHAPTER_LIST: extract_chapter_list,
    RequestType.CHAPTER: extract_chapter,
}
