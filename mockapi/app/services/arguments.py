"""
Normalization of loosely typed service arguments.

HTTP handlers and Python callers pass ``where`` and ``fields`` in many
shapes: a bare id, a comma separated string, a list or a mapping.  The
helpers here turn them into one of two explicit selector types,
:class:`IdList` or :class:`Filter`, so that the service only ever
branches on those.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple, Union

DELIMITER = ","


@dataclass(frozen=True)
class IdList:
    """Explicit list of object ids."""

    ids: Tuple[Any, ...]

    def clean(self) -> "Selector":
        ids = tuple(i for i in self.ids if i)
        # Nothing left to address directly: read the whole collection.
        if not ids:
            return Filter()
        return IdList(ids)

    def query(self) -> List[Any]:
        return list(self.ids)


@dataclass(frozen=True)
class Filter:
    """Attribute filter; an empty filter matches every object."""

    criteria: Dict[str, Any] = field(default_factory=dict)

    def clean(self) -> "Selector":
        return Filter({k: v for k, v in self.criteria.items() if v})

    def query(self) -> Dict[str, Any]:
        return dict(self.criteria)


Selector = Union[IdList, Filter]


def split(value: str) -> List[str]:
    return [part.strip() for part in value.split(DELIMITER)]


def to_int(value: Any, default: int) -> int:
    """Coerce ``value`` to a positive int, falling back to ``default``."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def normalize_fields(fields: Any) -> List[str]:
    """Return the requested projection as an ordered list without duplicates."""
    if not fields:
        return []
    if isinstance(fields, str):
        fields = split(fields)
    result: List[str] = []
    for name in fields:
        name = str(name).strip()
        if name and name not in result:
            result.append(name)
    return result


def normalize_where(where: Any, limit: int) -> Tuple[Selector, int]:
    """Turn a ``get`` selector into ``(IdList | Filter, limit)``.

    A mapping carrying ``id`` or a non-empty sequence selects its first
    id only and forces ``limit`` to 1.  A delimited string selects every
    id it names and sets ``limit`` to their count.  Any other scalar is
    a single id.
    """
    if isinstance(where, Mapping):
        if where.get("id") is not None:
            return IdList((where["id"],)), 1
        return Filter(dict(where)), limit
    if isinstance(where, (list, tuple)):
        if where:
            return IdList((where[0],)), 1
        return Filter(), limit
    if isinstance(where, str):
        if not where.strip():
            return Filter(), limit
        ids = split(where)
        return IdList(tuple(ids)), len(ids)
    if where is None or where is False:
        return Filter(), limit
    return IdList((where,)), 1


def normalize_target(where: Any) -> Union[List[Any], Dict[str, Any]]:
    """Turn a ``post`` target into a positional id list or a mapping."""
    if isinstance(where, Mapping):
        return dict(where)
    if isinstance(where, (list, tuple)):
        return list(where)
    if isinstance(where, str):
        return [i for i in split(where) if i] if where.strip() else []
    if where is None or where is False:
        return []
    return [where]
