from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from catalog import Catalog
from crawler.scraper import ScrapeSuccess
from ingestion_queue import IngestionQueue
from main import app, get_catalog, get_orchestrator, get_queue
from models import RequestType
from schemas import SeriesStub


@pytest.fixture
def client(orchestrator, store, registry):
    queue = Mock(spec=IngestionQueue)
    queue.enqueue_request.return_value = "job-1"

    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_catalog] = lambda: Catalog(store=store, providers=registry)
    app.dependency_overrides[get_queue] = lambda: queue
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_scrape_manga_list_then_read(client, scraper):
    scraper.run.return_value = ScrapeSuccess(
        request_type=RequestType.MANGA_LIST,
        url="https://www.asurascans.com/manga/list-mode/",
        records=[SeriesStub(
            type="manga_asura",
            id="solo-leveling",
            title="Solo Leveling",
            url="https://www.asurascans.com/manga/solo-leveling/",
        )],
    )

    response = client.post("/scrape/manga-list", json={"provider": "asura"})

    assert response.status_code == 202
    body = response.json()
    assert body["status"] == 202
    assert body["data"]["status"]["state"] == "completed"

    status = client.get("/status/asura")
    assert status.status_code == 200
    assert status.json()["data"]["failed_items"] == []

    series = client.get("/list/asura")
    assert series.status_code == 200
    assert [s["id"] for s in series.json()["data"]] == ["solo-leveling"]

    manga = client.get("/manga/asura/solo-leveling")
    assert manga.status_code == 200
    assert manga.json()["data"]["title"] == "Solo Leveling"


def test_scrape_manga_without_stub(client):
    response = client.post("/scrape/manga", json={"provider": "asura", "slug": "solo-leveling"})

    assert response.status_code == 404
    assert response.json()["status"] == 404
    assert "data" not in response.json()


def test_scrape_chapter_list_without_series(client):
    response = client.post("/scrape/chapter-list", json={"provider": "asura", "slug": "solo-leveling"})

    assert response.status_code == 404


def test_scrape_chapter_requires_series_slug(client):
    response = client.post("/scrape/chapter", json={"provider": "asura", "slug": "solo-leveling-chapter-1"})

    assert response.status_code == 422


def test_read_missing_entries(client):
    assert client.get("/status/asura").status_code == 404
    assert client.get("/list/asura/solo-leveling").status_code == 404
    assert client.get("/chapter/asura/solo-leveling/solo-leveling-chapter-1").status_code == 404


def test_list_providers(client):
    response = client.get("/providers")

    assert response.status_code == 200
    assert response.json()["data"] == ["alpha", "asura", "flame", "luminous", "realm"]


def test_enqueue(client):
    response = client.post("/queue", json={"request_type": "MangaList", "provider": "flame"})

    assert response.status_code == 202
    assert response.json()["job_id"] == "job-1"


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
