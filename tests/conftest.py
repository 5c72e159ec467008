import os

# Keep SQL echo off and stay away from a developer's .env
os.environ.setdefault("ENVIRONMENT", "test")

from pathlib import Path
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crawler.scraper import Scraper
from database import init_db
from ingestion import IngestionOrchestrator
from providers import ProviderRegistry
from store import SqlStore

FIXTURES = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return SqlStore(session_factory)


@pytest.fixture
def registry():
    return ProviderRegistry.from_settings()


@pytest.fixture
def scraper():
    return Mock(spec=Scraper)


@pytest.fixture
def orchestrator(store, scraper, registry):
    return IngestionOrchestrator(store=store, scraper=scraper, providers=registry)


@pytest.fixture
def load_fixture():
    return read_fixture
