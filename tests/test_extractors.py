import pytest

from crawler.extractors import (
    extract_chapter, extract_chapter_list, extract_manga, extract_manga_list, parse_html,
)
from errors import ExtractionError, SlugExtractionError


def test_extract_manga_list(load_fixture):
    records = extract_manga_list(parse_html(load_fixture("manga_list.html")), "asura")

    assert [r.id for r in records] == [
        "omniscient-readers-viewpoint",
        "solo-leveling",
        "swordmasters-youngest-son",
    ]
    first = records[0]
    assert first.type == "manga_asura"
    assert first.phase == "stub"
    assert first.title == "Omniscient Reader’s Viewpoint"
    assert first.url == "https://www.asurascans.com/manga/1672760368-omniscient-readers-viewpoint/"


def test_extract_manga_list_collapses_duplicate_slugs():
    html = """
    <div class="soralist">
      <a class="series" href="https://flamescans.org/series/111-omega/">Omega</a>
      <a class="series" href="https://flamescans.org/series/alpha/">Alpha</a>
      <a class="series" href="https://flamescans.org/series/222-omega/">Omega (renamed)</a>
    </div>
    """
    records = extract_manga_list(parse_html(html), "flame")

    assert [r.id for r in records] == ["omega", "alpha"]
    assert records[0].title == "Omega (renamed)"


def test_extract_manga_list_missing_href():
    html = '<div class="soralist"><a class="series">No link</a></div>'
    with pytest.raises(ExtractionError) as excinfo:
        extract_manga_list(parse_html(html), "flame")
    assert excinfo.value.field == "url"


def test_extract_manga(load_fixture):
    record = extract_manga(parse_html(load_fixture("manga.html")), "luminous")

    assert record.type == "manga_luminous"
    assert record.id == "a-returners-magic-should-be-special"
    assert record.phase == "full"
    assert record.title == "A Returner’s Magic Should Be Special"
    assert record.synopsis == (
        "The Shadow Labyrinth was a disaster that threatened to wipe out all of humanity."
    )
    assert record.cover == "https://luminousscans.com/wp-content/uploads/returner-cover.jpg"
    assert record.short_url == "https://luminousscans.com/?p=1234"
    assert record.canonical_url == (
        "https://luminousscans.com/series/1671234-a-returners-magic-should-be-special/"
    )


def test_extract_manga_synopsis_without_paragraph():
    html = """
    <html><head><link rel="canonical" href="https://alpha-scans.org/manga/tower-of-god/" /></head>
    <body>
      <h1 class="entry-title">Tower of God</h1>
      <div class="thumb"><img src="https://alpha-scans.org/cover.jpg" /></div>
      <div class="entry-content">  What do you desire? Money and wealth?  </div>
    </body></html>
    """
    record = extract_manga(parse_html(html), "alpha")

    assert record.synopsis == "What do you desire? Money and wealth?"
    assert record.short_url is None
    assert record.id == "tower-of-god"


def test_extract_manga_missing_cover(load_fixture):
    html = load_fixture("manga.html").replace('class="thumb"', 'class="no-thumb"')
    with pytest.raises(ExtractionError) as excinfo:
        extract_manga(parse_html(html), "luminous")
    assert excinfo.value.field == "cover"


def test_extract_chapter_list(load_fixture):
    records = extract_chapter_list(parse_html(load_fixture("chapter_list.html")), "luminous")

    assert [r.id for r in records] == [
        "a-returners-magic-should-be-special-chapter-3",
        "a-returners-magic-should-be-special-chapter-2",
        "a-returners-magic-should-be-special-chapter-1",
    ]
    assert {r.type for r in records} == {"chapter_luminous_a-returners-magic-should-be-special"}

    latest, middle, first = records
    assert latest.number == "Chapter 3 Season Finale"
    assert latest.order == 3
    assert latest.date == "March 3, 2023"
    assert middle.number == "Chapter 2"
    assert middle.url == "https://luminousscans.com/a-returners-magic-should-be-special-chapter-2/"
    assert first.date is None


def test_extract_chapter_list_decimal_chapter():
    html = """
    <link rel="canonical" href="https://www.asurascans.com/manga/solo-leveling/" />
    <div class="eplister">
      <ul>
        <li data-num="10.5">
          <a href="https://www.asurascans.com/solo-leveling-chapter-10.5/">
            <span class="chapternum">Chapter 10.5</span>
          </a>
        </li>
      </ul>
    </div>
    """
    records = extract_chapter_list(parse_html(html), "asura")

    assert len(records) == 1
    assert records[0].id == "solo-leveling-chapter-10.5"
    assert records[0].type == "chapter_asura_solo-leveling"
    assert records[0].order == 10.5


def test_extract_chapter_list_needs_canonical_link(load_fixture):
    html = load_fixture("chapter_list.html").replace('rel="canonical"', 'rel="alternate"')
    with pytest.raises(ExtractionError):
        extract_chapter_list(parse_html(html), "luminous")


def test_extract_chapter(load_fixture):
    record = extract_chapter(parse_html(load_fixture("chapter.html")), "luminous")

    assert record.id == "a-returners-magic-should-be-special-chapter-2"
    assert record.phase == "full"
    assert record.title == "A Returner’s Magic Should Be Special Chapter 2"
    assert record.short_url == "https://luminousscans.com/?p=5678"
    assert record.prev_slug == "a-returners-magic-should-be-special-chapter-1"
    assert record.next_slug == "a-returners-magic-should-be-special-chapter-3"
    assert record.content == [
        "https://luminousscans.com/wp-content/uploads/01.jpg",
        "https://luminousscans.com/wp-content/uploads/02.jpg",
        "https://luminousscans.com/wp-content/uploads/03.jpg",
    ]


def test_extract_chapter_nested_reader(load_fixture):
    record = extract_chapter(parse_html(load_fixture("chapter_realm.html")), "realm")

    # Canonical falls back to og:url
    assert record.canonical_url == "https://realmscans.com/3894-the-knight-king-chapter-1/"
    assert record.id == "the-knight-king-chapter-1"
    assert record.prev_slug is None
    assert record.next_slug == "the-knight-king-chapter-2"
    assert record.content == [
        "https://realmscans.com/uploads/k1-01.webp",
        "https://realmscans.com/uploads/k1-02.webp",
    ]


def test_extract_chapter_full_size_fallback(load_fixture):
    html = load_fixture("chapter.html").replace("wp-image-", "size-full attachment-")
    record = extract_chapter(parse_html(html), "luminous")

    assert record.content == [
        "https://luminousscans.com/wp-content/uploads/01.jpg",
        "https://luminousscans.com/wp-content/uploads/02.jpg",
        "https://luminousscans.com/wp-content/uploads/03.jpg",
    ]


def test_extract_chapter_without_images(load_fixture):
    html = load_fixture("chapter.html").replace("wp-image-", "lazy-")
    with pytest.raises(ExtractionError) as excinfo:
        extract_chapter(parse_html(html), "luminous")
    assert excinfo.value.field == "content"


def test_extract_chapter_without_reader_script(load_fixture):
    html = load_fixture("chapter.html").replace("ts_reader.run", "reader.start")
    with pytest.raises(ExtractionError) as excinfo:
        extract_chapter(parse_html(html), "luminous")
    assert excinfo.value.field == "reader_script"


def test_extract_chapter_unusable_canonical(load_fixture):
    html = load_fixture("chapter.html").replace(
        "https://luminousscans.com/a-returners-magic-should-be-special-chapter-2/",
        "https://luminousscans.com/",
    )
    with pytest.raises(SlugExtractionError):
        extract_chapter(parse_html(html), "luminous")
