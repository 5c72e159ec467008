"""Registry of supported manga providers."""
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping

from pydantic import BaseModel, ConfigDict

from config import ProviderConfig, settings
from errors import UnknownProvider

logger = logging.getLogger(__name__)


class Provider(BaseModel):
    """A manga provider and its URL conventions."""
    name: str
    base_url: str
    path_segment: str

    model_config = ConfigDict(frozen=True)

    @property
    def list_url(self) -> str:
        """URL of the provider's full series index."""
        return f"{self.base_url.rstrip('/')}/{self.path_segment.strip('/')}/list-mode/"


class ProviderRegistry:
    """
    Registry mapping provider names to their base URL and path convention.

    Built once from configuration; lookups never mutate it.
    """

    def __init__(self, providers: Mapping[str, ProviderConfig]):
        table: Dict[str, Provider] = {
            name: Provider(name=name, base_url=config.base, path_segment=config.slug)
            for name, config in providers.items()
        }
        self._providers = MappingProxyType(table)

    @classmethod
    def from_settings(cls, app_settings=None) -> "ProviderRegistry":
        """Build the registry from application settings."""
        return cls((app_settings or settings).providers)

    def resolve(self, name: str) -> Provider:
        """
        Look up a provider.

        Args:
            name: Provider name (e.g. 'asura')

        Returns:
            The registered provider

        Raises:
            UnknownProvider: If no provider is registered under this name
        """
        provider = self._providers.get(name)
        if provider is None:
            logger.warning(f"No provider registered under name: {name}")
            raise UnknownProvider(name)
        return provider

    def is_supported(self, name: str) -> bool:
        """Check if provider is registered."""
        return name in self._providers

    def names(self) -> List[str]:
        """Registered provider names, in registration order."""
        return list(self._providers.keys())
