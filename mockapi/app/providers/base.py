"""
Shared behaviour of the bundled storage providers.

``BaseResourceProvider`` implements the whole provider contract on
top of four storage primitives (``_load``, ``_all``, ``_insert`` and
``_update``).  Filtering, sorting, projection and id assignment live
here so that the memory and SQLite providers only move documents.

Filter semantics: every criterion must match.  A criterion value may
be a list or a comma separated string of alternatives; values are
compared as strings, and list attributes match when any item matches.
Sorting accepts ``"field"``, ``"-field"`` (descending) or several of
them separated by commas.
"""

import copy
import logging
from abc import abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional

from mockapi.app.core import validate
from mockapi.app.core.errors import ConflictError, NotFoundError
from mockapi.app.services.interfaces import ResourceProvider

logger = logging.getLogger(__name__)


def key_of(id: Any) -> str:
    return str(id)


def _alternatives(value: Any) -> List[str]:
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value]
    if isinstance(value, str) and "," in value:
        return [v.strip() for v in value.split(",")]
    return [str(value)]


def matches(obj: Mapping[str, Any], criteria: Mapping[str, Any]) -> bool:
    for name, expected in criteria.items():
        if name not in obj:
            return False
        options = _alternatives(expected)
        actual = obj[name]
        values = actual if isinstance(actual, list) else [actual]
        if not any(str(v) in options for v in values):
            return False
    return True


def _sort_value(value: Any):
    if value is None:
        return (2, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, str(value))


def sort_objects(objects: List[Dict[str, Any]], sort: Optional[str]) -> List[Dict[str, Any]]:
    if not sort:
        return objects
    keys = [k.strip() for k in str(sort).split(",") if k.strip()]
    # Stable sorts applied from the least significant key.
    for key in reversed(keys):
        descending = key.startswith("-")
        name = key.lstrip("-+")
        objects = sorted(objects, key=lambda o: _sort_value(o.get(name)), reverse=descending)
    return objects


def project(obj: Mapping[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    fields = list(fields or ())
    if not fields:
        return copy.deepcopy(dict(obj))
    return {name: copy.deepcopy(obj[name]) for name in fields if name in obj}


class BaseResourceProvider(ResourceProvider):
    """Provider contract implemented over simple document storage."""

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        options = {**(options or {}), **kwargs}
        validate.require_attributes(("resource",), options, f"{type(self).__name__} options")
        validate.is_non_empty_string(options["resource"], "Provider `resource` option")
        self.resource: str = options["resource"]
        self._endpoint: str = options.get("endpoint") or "/"
        self._found = 0

    # Storage primitives ------------------------------------------------
    @abstractmethod
    def _load(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored document for ``key`` or ``None``."""

    @abstractmethod
    def _all(self) -> List[Dict[str, Any]]:
        """Return every stored document in insertion order."""

    @abstractmethod
    def _insert(self, key: str, obj: Dict[str, Any]) -> None:
        """Store a new document."""

    @abstractmethod
    def _update(self, key: str, obj: Dict[str, Any]) -> None:
        """Replace an existing document."""

    def _next_id(self) -> int:
        numbers = [o["id"] for o in self._all() if isinstance(o.get("id"), int)]
        return max(numbers, default=0) + 1

    def _require(self, id: Any) -> Dict[str, Any]:
        obj = self._load(key_of(id))
        if obj is None:
            raise NotFoundError(f"{self.resource} object with ID {id} not found")
        return obj

    # Contract -----------------------------------------------------------
    def find(self, filter, limit=None, offset=0, sort=None) -> List[Any]:
        hits = [o for o in self._all() if matches(o, filter or {})]
        hits = sort_objects(hits, sort)
        self._found = len(hits)
        start = max(int(offset or 0), 0)
        stop = start + int(limit) if limit else None
        return [o["id"] for o in hits[start:stop]]

    def fetch(self, ids, fields=()) -> List[Dict[str, Any]]:
        return [self.get(id, fields) for id in ids]

    def get(self, id, fields=()) -> Dict[str, Any]:
        return project(self._require(id), fields)

    def get_attr(self, id, field):
        obj = self._require(id)
        if field not in obj:
            raise NotFoundError(f"{self.resource} object with ID {id} has no attribute `{field}`")
        return copy.deepcopy(obj[field])

    def add(self, obj) -> Dict[str, Any]:
        document = copy.deepcopy(dict(obj))
        if document.get("id") is None:
            document["id"] = self._next_id()
        key = key_of(document["id"])
        if self._load(key) is not None:
            raise ConflictError(f"{self.resource} object with ID {document['id']} already exists")
        self._insert(key, document)
        logger.debug("Stored %s %s", self.resource, key)
        return copy.deepcopy(document)

    def add_attr(self, id, field, value):
        obj = self._require(id)
        current = obj.get(field)
        if isinstance(current, list) and isinstance(value, list):
            value = current + [v for v in value if v not in current]
        obj[field] = copy.deepcopy(value)
        self._update(key_of(id), obj)
        return copy.deepcopy(value)

    def exists(self, id) -> bool:
        return self._load(key_of(id)) is not None

    def found(self) -> int:
        return self._found

    def endpoint(self) -> str:
        return f"{self._endpoint.rstrip('/')}/{self.resource}"
