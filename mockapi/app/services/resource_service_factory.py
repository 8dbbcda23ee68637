"""
Lazy registry of resource services.

The factory maps resource names to services.  Entries are either
ready service instances or descriptors that are instantiated on the
first ``get``.  Example::

    factory = ResourceServiceFactory([
        # Default service used for any resource name
        (ResourceService, {
            "provider": (ProviderFactory, [(MemoryResourceProvider, {})]),
            "endpoint": "/api/v1",
        }),
        # Whitelist: only these names (and named entries) resolve
        "posts",
        "comments",
        # Specific services
        {
            "users": "myapp.services:UserService",
            "messages": MessageService({"resource": "messages", "provider": provider}),
        },
    ])

    factory.get("posts").get(1)

Without a default entry only named entries resolve.  With a default
and no whitelist names any plural name resolves.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from mockapi.app.core import validate
from mockapi.app.core.loader import load_class
from mockapi.app.core.errors import ConfigurationError, NotFoundError
from mockapi.app.services.interfaces import (
    ResourceProvider,
    ResourceProviderFactory,
    ResourceServiceInterface,
)

logger = logging.getLogger(__name__)

INDEX_REQUESTS = "/resource.type/resource.id/resource.attr"
INDEX_METHODS = ["GET", "POST", "OPTIONS"]


@dataclass(frozen=True)
class ServiceDescriptor:
    """How to build a service that has not been requested yet."""

    service_class: type
    resource: str
    provider: Any


class _ServiceSlot:
    """Holds a descriptor until the service is built, then the service."""

    __slots__ = ("descriptor", "instance")

    def __init__(self, descriptor: Optional[ServiceDescriptor] = None, instance: Any = None) -> None:
        self.descriptor = descriptor
        self.instance = instance

    @property
    def resolved(self) -> bool:
        return self.instance is not None


def _is_pair(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 2


class ResourceServiceFactory:
    """Resolves resource names to configured services on first use."""

    def __init__(self, services: Any = None) -> None:
        self.default_service_class: Optional[type] = None
        self.default_provider: Any = None
        self.default_endpoint = "/"
        self.strict = True

        self._registry: Dict[str, _ServiceSlot] = {}
        self._lock = threading.RLock()

        positional, named = self._split_entries(services)

        whitelist = []
        for entry in positional:
            if _is_pair(entry) and isinstance(entry[1], Mapping) and "provider" in entry[1]:
                self._set_default(entry)
            else:
                whitelist.append(entry)

        for name in whitelist:
            if not validate.is_non_empty_string(name, False):
                raise ConfigurationError(f"Unsupported resource service entry {name!r}")
            if self.default_service_class is None:
                raise ConfigurationError(
                    f"Resource `{name}` can only be whitelisted when a default service is configured"
                )
            self._registry[name] = _ServiceSlot(self._default_descriptor(name))
            # Explicit names narrow resolution to the registered services.
            self.strict = True

        for name, service in named.items():
            self._registry[name] = self._named_slot(name, service)

    @staticmethod
    def _split_entries(services: Any) -> Tuple[List[Any], Dict[str, Any]]:
        if services is None:
            return [], {}
        if isinstance(services, Mapping):
            return [], dict(services)
        if isinstance(services, (str, bytes)) or not isinstance(services, Iterable):
            raise ConfigurationError("Resource services must be a mapping or a list of entries")
        positional: List[Any] = []
        named: Dict[str, Any] = {}
        for entry in services:
            if isinstance(entry, Mapping):
                named.update(entry)
            else:
                positional.append(entry)
        return positional, named

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    @staticmethod
    def validate_service_class(value: Any, description: str = "resource service class") -> type:
        cls = load_class(value, description)
        if not isinstance(cls, type) or not issubclass(cls, ResourceServiceInterface):
            raise ConfigurationError(f"Service `{value}` must implement ResourceServiceInterface")
        return cls

    @staticmethod
    def validate_resource_provider(value: Any, description: str) -> Any:
        """Accept a provider factory or a lazy ``(factory_class, args)`` pair."""
        if isinstance(value, ResourceProviderFactory):
            return value
        if _is_pair(value):
            cls = load_class(value[0], description)
            if isinstance(cls, type) and issubclass(cls, ResourceProviderFactory):
                return (cls, value[1])
        raise ConfigurationError(f"{description} must be array of arguments or Resource Provider Factory")

    def _set_default(self, entry: Tuple[Any, Mapping[str, Any]]) -> None:
        if self.default_service_class is not None:
            raise ConfigurationError("Only one default resource service may be configured")

        service_class, options = entry
        cls = self.validate_service_class(
            service_class, "default resource service argument[0], class name,"
        )
        provider = self.validate_resource_provider(
            options["provider"], "default resource service argument[1][provider]"
        )

        endpoint = options.get("endpoint")
        if endpoint is not None:
            validate.is_url(endpoint, "default resource service argument[1][endpoint]")
            self.default_endpoint = endpoint.rstrip("/") or "/"
            provider = self._propagate_endpoint(provider, self.default_endpoint)

        if isinstance(provider, tuple):
            provider = self._build_provider(provider)

        self.default_service_class = cls
        self.default_provider = provider
        self.strict = False

    @staticmethod
    def _propagate_endpoint(provider: Any, endpoint: str) -> Any:
        """Seed the first nested provider options with ``endpoint``.

        A lazy provider factory is described as
        ``(factory_class, [(provider_class, options), ...])``; only the
        first provider options mapping is touched, and only when it does
        not name an endpoint itself.
        """
        if not isinstance(provider, tuple):
            return provider
        factory_class, args = provider
        if not isinstance(args, (list, tuple)) or not args or not _is_pair(args[0]):
            return provider
        provider_class, options = args[0]
        if not isinstance(options, Mapping) or "endpoint" in options:
            return provider
        seeded = (provider_class, {**options, "endpoint": endpoint})
        return (factory_class, [seeded, *args[1:]])

    @staticmethod
    def _build_provider(provider: Tuple[type, Any]) -> ResourceProviderFactory:
        factory_class, args = provider
        return factory_class(args)

    def _default_descriptor(self, name: str) -> ServiceDescriptor:
        return ServiceDescriptor(self.default_service_class, name, self.default_provider)

    def _named_slot(self, name: str, service: Any) -> _ServiceSlot:
        validate.is_non_empty_string(name, "Resource service name")

        if isinstance(service, ResourceServiceInterface):
            return _ServiceSlot(instance=service)

        if isinstance(service, (ResourceProvider, ResourceProviderFactory)):
            if self.default_service_class is None:
                raise ConfigurationError(
                    "Provider must be wrapped in a resource service if no default class is set"
                )
            return _ServiceSlot(ServiceDescriptor(self.default_service_class, name, service))

        if _is_pair(service):
            cls = self.validate_service_class(service[0], f"`services[{name}][0]`")
            provider = service[1]
            if not isinstance(provider, (ResourceProvider, ResourceProviderFactory)):
                provider = self.validate_resource_provider(provider, f"`services[{name}][1]`")
            return _ServiceSlot(ServiceDescriptor(cls, name, provider))

        if isinstance(service, (list, tuple)) and len(service) == 1:
            service = service[0]

        if self.default_provider is not None and (
            isinstance(service, type) or validate.is_non_empty_string(service, False)
        ):
            cls = self.validate_service_class(service, f"`services[{name}]`")
            return _ServiceSlot(ServiceDescriptor(cls, name, self.default_provider))

        raise ConfigurationError(f"Service `{name}` must be a service, provider, class name or pair")

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def get(self, type: str) -> ResourceServiceInterface:
        """Return the service for resource ``type``, building it on first use."""
        with self._lock:
            slot = self._registry.get(type)
            if slot is not None and slot.resolved:
                return slot.instance

            if self.strict and slot is None:
                raise NotFoundError(f"Unable to instantiate resource `{type}` service")

            descriptor = slot.descriptor if slot is not None else self._default_descriptor(type)
            instance = self._instantiate(descriptor)
            self._registry[type] = _ServiceSlot(instance=instance)
            logger.info("Instantiated %s service for `%s`", instance.__class__.__name__, type)
            return instance

    def _instantiate(self, descriptor: ServiceDescriptor) -> ResourceServiceInterface:
        provider = descriptor.provider
        if isinstance(provider, tuple):
            provider = self._build_provider(provider)
        return descriptor.service_class(
            {"resource": descriptor.resource, "provider": provider, "services": self}
        )

    def __contains__(self, type: str) -> bool:
        return type in self._registry

    def names(self) -> List[str]:
        with self._lock:
            return list(self._registry)

    def index(self) -> Dict[str, Any]:
        endpoint = self.default_endpoint.rstrip("/")
        return {
            "endpoint": self.default_endpoint,
            "requests": INDEX_REQUESTS,
            "methods": list(INDEX_METHODS),
            "resources": [{"type": name, "link": f"{endpoint}/{name}"} for name in self.names()],
        }
