"""
CRUD semantics for a single resource.

``ResourceService`` owns one provider and translates loosely shaped
``get``/``post`` calls into provider operations:

    GET /                 get()
    GET /id               get('id') or get(['id']) or get({'id': 'id'})
    GET /id1,id2          get('id1,id2')
    GET /id/attr          get('id', 'attr')
    GET /id/attr1,attr2   get('id', 'attr1,attr2')

    POST /                post({...}) or post([{...}, ...])
    POST /id              post({...}, 'id')
    POST /id1,id2         post([{id: 1, ...}, {id: 2, ...}], 'id1,id2')
    POST /id/attr         post(<any>, ['id'], 'attr')
    POST /id1,id2/a1,a2   post({a1: v1, a2: v2}, ['id1', 'id2'], ['a1', 'a2'])

Relations are created by passing a mapping of resource names to
selectors as ``where`` when creating objects; the peer services are
resolved through the ``services`` resolver (normally the factory).

Batch operations are not transactional: objects created before a
failing item stay in the store.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

from mockapi.app.core import inflect
from mockapi.app.core.errors import BadRequestError, ConfigurationError, ConflictError, NotFoundError
from mockapi.app.schemas.resource import ServiceArguments
from mockapi.app.services.arguments import (
    Filter,
    normalize_fields,
    normalize_target,
    normalize_where,
    to_int,
)
from mockapi.app.services.interfaces import ResourceProviderFactory, ResourceServiceInterface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Labels:
    singular: str
    plural: str
    singular_capitalized: str
    plural_capitalized: str

    @classmethod
    def from_plural(cls, plural: str) -> "Labels":
        singular = inflect.singularize(plural)
        return cls(singular, plural, inflect.ucfirst(singular), inflect.ucfirst(plural))


class ResourceService(ResourceServiceInterface):
    """Generic CRUD service bound to one resource and one provider."""

    limit = 10

    # Methods answered by this service, reported by ``options``.
    methods = ("GET", "POST", "OPTIONS")

    def __init__(
        self,
        resource: Any = None,
        provider: Any = None,
        services: Any = None,
        limit: Optional[int] = None,
    ) -> None:
        # The factory passes a single ``{resource, provider, services}`` mapping.
        args = dict(resource) if isinstance(resource, Mapping) else {"resource": resource}
        for name, value in (("provider", provider), ("services", services), ("limit", limit)):
            if value is not None:
                args[name] = value
        arguments = ServiceArguments.parse(args)

        self.resource = arguments.resource
        self.labels = Labels.from_plural(arguments.resource)
        self.services = arguments.services
        if arguments.limit:
            self.limit = arguments.limit

        provider = arguments.provider
        if isinstance(provider, ResourceProviderFactory):
            provider = provider.get(self.resource)
        self.provider = provider

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.resource}>"

    def options(self) -> Dict[str, Any]:
        return {
            "resource": self.resource,
            "singular": self.labels.singular,
            "endpoint": self.provider.endpoint(),
            "methods": list(self.methods),
        }

    # ------------------------------------------------------------------
    # GET
    # ------------------------------------------------------------------
    def get(self, where=None, fields=None, limit=None, offset=0, sort=None) -> Dict[str, Any]:
        """Read one object, a list of objects by id, or a filtered page.

        Returns ``{"data": ..., "links": {"prev": ..., "next": ...}}``
        with ``links`` left out when there is no other page.  A single
        requested field of a single object returns just that value.
        """
        offset = to_int(offset, 0)
        limit = to_int(limit, self.limit)
        fields = normalize_fields(fields)

        selector, limit = normalize_where(where, limit)
        selector = selector.clean()

        if isinstance(selector, Filter):
            ids = self.provider.find(selector.criteria, limit, offset, sort)
            if not ids:
                raise NotFoundError("No more results")
        else:
            ids = list(selector.ids)

        query = {
            "filter": selector.query(),
            "fields": fields,
            "limit": limit,
            "offset": offset,
            "sort": sort,
        }

        if limit == 1:
            if len(fields) == 1:
                return {"data": self.provider.get_attr(ids[0], fields[0])}
            return self._envelope(self.provider.get(ids[0], fields), query)

        return self._envelope(self.provider.fetch(ids, fields), query)

    def _envelope(self, data: Any, query: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {"data": data}
        links = {
            k: v
            for k, v in (("prev", self.link_prev(query)), ("next", self.link_next(query)))
            if v
        }
        if links:
            result["links"] = links
        return result

    def link_next(self, query: Dict[str, Any]) -> Optional[str]:
        offset = query["offset"] + query["limit"]
        if offset >= self.provider.found():
            return None
        return self._link(query, offset)

    def link_prev(self, query: Dict[str, Any]) -> Optional[str]:
        offset = query["offset"] - query["limit"]
        if query["limit"] + offset <= 0:
            return None
        return self._link(query, max(offset, 0))

    def _link(self, query: Dict[str, Any], offset: int) -> str:
        params: List[Tuple[str, Any]] = []
        selector = query["filter"]
        if isinstance(selector, list):
            params.extend((f"filter[{i}]", v) for i, v in enumerate(selector))
        elif selector:
            params.extend(self.build_filter_query(selector))
        if query["fields"]:
            params.append(("fields", ",".join(query["fields"])))
        params.append(("limit", query["limit"]))
        params.append(("offset", offset))
        if query["sort"]:
            params.append(("sort", query["sort"]))
        return f"{self.provider.endpoint()}?{urlencode(params)}"

    @staticmethod
    def build_filter_query(criteria: Mapping[str, Any]) -> List[Tuple[str, Any]]:
        """Encode a filter mapping as ``filter[key]=value`` pairs."""
        params = []
        for key, value in criteria.items():
            if isinstance(value, (list, tuple, set)):
                value = ",".join(str(v) for v in value)
            params.append((f"filter[{key}]", value))
        return params

    # ------------------------------------------------------------------
    # POST
    # ------------------------------------------------------------------
    def post(self, payload, where=None, fields=None) -> Any:
        """Create objects, or add attributes to existing objects.

        With ``fields`` the call adds those attributes to the objects
        selected by ``where``.  Without ``fields`` it creates the object
        (or list of objects) in ``payload``; a mapping ``where`` links
        the new objects to objects of other resources, a list ``where``
        assigns their ids.
        """
        if not payload:
            raise BadRequestError(
                f"To create {self.labels.singular} requires payload to be object or array of objects"
            )

        fields = normalize_fields(fields)
        target = normalize_target(where)

        if fields:
            return self._post_attributes(payload, target, fields)
        return self._post_objects(payload, target)

    def _post_attributes(self, payload: Any, target, fields: List[str]) -> Any:
        if not target:
            raise BadRequestError(
                f"Creating {self.labels.singular} object attribute(s) on undefined object(s)"
            )

        if len(fields) == 1 and isinstance(target, list) and len(target) == 1:
            field = fields[0]
            if isinstance(payload, Mapping) and field in payload:
                payload = payload[field]
            logger.info("Adding %s %s attribute `%s`", self.labels.singular, target[0], field)
            return self.provider.add_attr(target[0], field, payload)

        if not isinstance(payload, Mapping) or set(fields) != set(payload):
            raise BadRequestError("Fields must match payload object attributes")

        if isinstance(target, list):
            ids = target
            for id in ids:
                if not self.provider.exists(id):
                    raise NotFoundError(f"{self.labels.singular_capitalized} with ID {id} not found")
        else:
            ids = self.provider.find(target)

        for id in ids:
            for key, value in payload.items():
                self.provider.add_attr(id, key, value)
        logger.info("Added %s to %d %s", ", ".join(fields), len(ids), self.labels.plural)
        return ids

    def _post_objects(self, payload: Any, target) -> Any:
        single = isinstance(payload, Mapping)
        if single:
            objects = [dict(payload)]
        elif isinstance(payload, list) and all(isinstance(o, Mapping) for o in payload):
            objects = [dict(o) for o in payload]
        else:
            raise BadRequestError("Payload must be object or array of objects")

        relations: Dict[str, Any] = {}
        ids: List[Any] = []

        if isinstance(target, dict) and target:
            if "id" in target:
                raise ConfigurationError(
                    "Where clause creates relations. Sure about object type `id`?"
                )
            relations = self._resolve_relations(target)
        elif target:
            if len(target) != len(objects):
                raise BadRequestError("If passing payload AND IDs together, make sure count matches")
            for id, obj in zip(target, objects):
                if "id" in obj and str(obj["id"]) != str(id):
                    raise BadRequestError("If passing payload AND IDs together, make sure they match")
                obj.setdefault("id", id)
            ids = list(target)

        if not ids:
            ids = [o["id"] for o in objects if o.get("id") is not None]

        seen = set()
        for id in ids:
            if str(id) in seen or self.provider.exists(id):
                raise ConflictError(f"{self.labels.singular_capitalized} with ID {id} already exists")
            seen.add(str(id))

        created = []
        for obj in objects:
            for resource, relation_id in relations.items():
                obj[resource] = [relation_id]
            created.append(self.provider.add(obj))
        logger.info("Created %d %s", len(created), self.labels.plural)

        if relations:
            created_ids = [o["id"] for o in created]
            for resource, relation_id in relations.items():
                self._peer(resource).post(created_ids, [relation_id], self.resource)

        return created[0] if single else created

    def _resolve_relations(self, target: Dict[str, Any]) -> Dict[str, Any]:
        """Replace each relation selector with the id of the object it selects."""
        relations = {}
        for resource, selector in target.items():
            peer = self._peer(resource)
            data = peer.get(selector)["data"]
            if not isinstance(data, Mapping) or "id" not in data:
                raise BadRequestError(
                    f"Relation `{resource}` must select a single {inflect.singularize(resource)}"
                )
            relations[resource] = data["id"]
            logger.debug("Relating %s to %s %s", self.labels.plural, resource, data["id"])
        return relations

    def _peer(self, resource: str) -> "ResourceService":
        if self.services is None:
            raise ConfigurationError(
                f"{self.labels.plural_capitalized} service has no peer services to create `{resource}` relations"
            )
        return self.services.get(resource)
