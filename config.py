"""Application configuration."""
from pydantic import BaseModel
from pydantic_settings import BaseSettings
from typing import Dict, Optional


class ProviderConfig(BaseModel):
    """Base URL and path convention of a manga provider."""
    base: str
    slug: str


DEFAULT_PROVIDERS = {
    "alpha": ProviderConfig(base="https://alpha-scans.org", slug="manga"),
    "asura": ProviderConfig(base="https://www.asurascans.com", slug="manga"),
    "flame": ProviderConfig(base="https://flamescans.org", slug="series"),
    "luminous": ProviderConfig(base="https://luminousscans.com", slug="series"),
    "realm": ProviderConfig(base="https://realmscans.com", slug="series"),
}


class Settings(BaseSettings):
    """Application settings."""

    # Database
    database_url: str = "sqlite:///./manga_ingestion.db"

    # Redis
    redis_url: Optional[str] = "redis://localhost:6379/0"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True

    # Crawler
    crawler_user_agent: str = "Mozilla/5.0 (Windows NT 5.1; rv:5.0) Gecko/20100101 Firefox/5.0"
    crawler_timeout: float = 30.0

    # Providers (JSON mapping in the environment, e.g. PROVIDERS='{"x": {...}}')
    providers: Dict[str, ProviderConfig] = DEFAULT_PROVIDERS

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
