"""
Capability contracts shared by services, providers and the factory.

``ResourceProvider`` is the storage capability a service consumes,
``ResourceProviderFactory`` hands out a provider per resource name,
and ``ResourceServiceInterface`` marks classes the service factory is
allowed to instantiate.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional


class ResourceProvider(ABC):
    """Storage backend for a single resource."""

    @abstractmethod
    def find(
        self,
        filter: Mapping[str, Any],
        limit: Optional[int] = None,
        offset: int = 0,
        sort: Optional[str] = None,
    ) -> List[Any]:
        """Return the ids of objects matching ``filter``."""

    @abstractmethod
    def fetch(self, ids: Iterable[Any], fields: Iterable[str] = ()) -> List[Dict[str, Any]]:
        """Return the objects with the given ids, projected to ``fields``."""

    @abstractmethod
    def get(self, id: Any, fields: Iterable[str] = ()) -> Dict[str, Any]:
        """Return one object, projected to ``fields``."""

    @abstractmethod
    def get_attr(self, id: Any, field: str) -> Any:
        """Return a single attribute value of one object."""

    @abstractmethod
    def add(self, obj: Mapping[str, Any]) -> Dict[str, Any]:
        """Store a new object and return it with its assigned ``id``."""

    @abstractmethod
    def add_attr(self, id: Any, field: str, value: Any) -> Any:
        """Add ``value`` to attribute ``field`` of an existing object."""

    @abstractmethod
    def exists(self, id: Any) -> bool:
        """Return ``True`` if an object with ``id`` is stored."""

    @abstractmethod
    def found(self) -> int:
        """Return the total number of matches of the last ``find`` call."""

    @abstractmethod
    def endpoint(self) -> str:
        """Return the canonical base URL of the resource."""


class ResourceProviderFactory(ABC):
    """Creates providers for resource names."""

    @abstractmethod
    def get(self, resource: str) -> ResourceProvider:
        """Return the provider bound to ``resource``."""


class ResourceServiceInterface(ABC):
    """A per-resource CRUD service."""

    resource: str

    @abstractmethod
    def get(self, where=None, fields=None, limit=None, offset=0, sort=None) -> Dict[str, Any]:
        """Read one object, a set of objects or a page of objects."""

    @abstractmethod
    def post(self, payload, where=None, fields=None) -> Any:
        """Create objects or add object attributes."""
