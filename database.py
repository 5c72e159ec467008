"""Database setup and session management."""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from config import settings

engine = create_engine(
    settings.database_url,
    echo=settings.environment == "development",
    future=True,
)

SessionLocal = sessionmaker(
    engine,
    expire_on_commit=False,
)

# Base class for models
Base = declarative_base()


def init_db(bind=None):
    """Create all tables that do not exist yet."""
    # Register models on the metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
