"""
In-memory provider.

Documents live in a dictionary for the lifetime of the provider.  It
is deterministic and thread-safe, which makes it the provider of
choice in tests and for throwaway mock APIs (``STORAGE_BACKEND=memory``).
"""

import threading
from typing import Any, Dict, List, Mapping, Optional

from mockapi.app.providers.base import BaseResourceProvider


class MemoryResourceProvider(BaseResourceProvider):
    """Thread-safe in-memory provider for one resource."""

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        super().__init__(options, **kwargs)
        self._lock = threading.RLock()
        # Key: str(id); dicts keep insertion order.
        self._documents: Dict[str, Dict[str, Any]] = {}

    def _load(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._documents.get(key)
            return dict(document) if document is not None else None

    def _all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(d) for d in self._documents.values()]

    def _insert(self, key: str, obj: Dict[str, Any]) -> None:
        with self._lock:
            self._documents[key] = obj

    def _update(self, key: str, obj: Dict[str, Any]) -> None:
        with self._lock:
            self._documents[key] = obj

    def add(self, obj):
        # Id assignment and insert must not interleave with another add.
        with self._lock:
            return super().add(obj)

    def add_attr(self, id, field, value):
        with self._lock:
            return super().add_attr(id, field, value)
