"""
Provider factory handing out one provider per resource name.

The factory is configured with a list of ``(provider_class, options)``
pairs.  The first pair whose options either omit ``resources`` or
list the requested name is used; the resource name and the options
are passed to the provider class.  Providers are cached, so every
service asking for the same resource shares one provider.
"""

import logging
import threading
from typing import Any, Dict, List, Tuple

from mockapi.app.core.errors import ConfigurationError, NotFoundError
from mockapi.app.core.loader import load_class
from mockapi.app.services.interfaces import ResourceProvider, ResourceProviderFactory

logger = logging.getLogger(__name__)


class ProviderFactory(ResourceProviderFactory):
    def __init__(self, providers: Any) -> None:
        if not isinstance(providers, (list, tuple)) or not providers:
            raise ConfigurationError("Provider factory requires a list of (provider class, options) pairs")
        self._providers: List[Tuple[type, Dict[str, Any]]] = []
        for index, entry in enumerate(providers):
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise ConfigurationError(f"Provider entry {index} must be a (class, options) pair")
            cls = load_class(entry[0], f"provider class at index {index}")
            if not isinstance(cls, type) or not issubclass(cls, ResourceProvider):
                raise ConfigurationError(f"Provider `{entry[0]}` must implement ResourceProvider")
            self._providers.append((cls, dict(entry[1] or {})))
        self._cache: Dict[str, ResourceProvider] = {}
        self._lock = threading.Lock()

    def get(self, resource: str) -> ResourceProvider:
        with self._lock:
            if resource not in self._cache:
                cls, options = self._select(resource)
                options = {k: v for k, v in options.items() if k != "resources"}
                self._cache[resource] = cls({**options, "resource": resource})
                logger.debug("Created %s for `%s`", cls.__name__, resource)
            return self._cache[resource]

    def _select(self, resource: str) -> Tuple[type, Dict[str, Any]]:
        for cls, options in self._providers:
            names = options.get("resources")
            if not names or resource in names:
                return cls, options
        raise NotFoundError(f"No provider configured for resource `{resource}`")
