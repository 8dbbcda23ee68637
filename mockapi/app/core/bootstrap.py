"""
Wiring of the service factory from settings.

``build_factory`` translates :class:`Settings` into the factory
configuration: one default service backed by the configured storage,
optionally narrowed to the ``RESOURCES`` whitelist.  ``get_factory``
caches the factory for the lifetime of the process and is used as a
FastAPI dependency.
"""

import logging
from functools import lru_cache
from typing import Any, List, Optional

from mockapi.app.core.config import Settings, settings
from mockapi.app.core.errors import ConfigurationError
from mockapi.app.providers.factory import ProviderFactory
from mockapi.app.providers.memory import MemoryResourceProvider
from mockapi.app.providers.sqlite import SQLiteResourceProvider
from mockapi.app.services.resource_service import ResourceService
from mockapi.app.services.resource_service_factory import ResourceServiceFactory

logger = logging.getLogger(__name__)


def _provider_entry(config: Settings) -> tuple:
    backend = config.storage_backend.lower()
    if backend == "memory":
        return (MemoryResourceProvider, {})
    if backend == "sqlite":
        return (SQLiteResourceProvider, {"database": config.database_url})
    raise ConfigurationError(f"Unknown storage backend `{config.storage_backend}`")


def service_class(config: Settings) -> type:
    """Return the service class with the configured default page size."""
    if config.page_size <= 0 or config.page_size == ResourceService.limit:
        return ResourceService
    return type("ResourceService", (ResourceService,), {"limit": config.page_size})


def factory_config(config: Settings) -> List[Any]:
    entries: List[Any] = [
        (
            service_class(config),
            {
                "provider": (ProviderFactory, [_provider_entry(config)]),
                "endpoint": config.api_prefix,
            },
        )
    ]
    entries.extend(config.resources)
    return entries


def build_factory(config: Optional[Settings] = None) -> ResourceServiceFactory:
    config = config or settings
    factory = ResourceServiceFactory(factory_config(config))
    logger.info(
        "Resource services ready (storage=%s, whitelist=%s)",
        config.storage_backend,
        ",".join(config.resources) or "any",
    )
    return factory


@lru_cache(maxsize=1)
def get_factory() -> ResourceServiceFactory:
    return build_factory(settings)
