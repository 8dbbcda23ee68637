"""
Generic resource endpoints for API v1.

Every resource name is served by the same set of routes; the service
factory decides which names exist.  Path segments map directly onto
the service arguments::

    GET  /{type}                  get(filter, fields, limit, offset, sort)
    GET  /{type}/{ids}            get('id1,id2', fields, ...)
    GET  /{type}/{ids}/{attrs}    get('id', 'attr1,attr2')
    POST /{type}                  post(payload, relations)
    POST /{type}/{ids}            post(payload, 'id1,id2')
    POST /{type}/{ids}/{attrs}    post(payload, 'id1,id2', 'attr1,attr2')

Filters are passed as ``filter[name]=value`` query parameters.  Numeric
names (``filter[0]=7``) select ids, which is how pagination links of
id based reads are encoded.  On ``POST /{type}`` the same parameters
name related objects, e.g. ``POST /comments?filter[posts]=7``.
"""

import re
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Body, Depends, Query, Request, status

from mockapi.app.core import validate
from mockapi.app.core.bootstrap import get_factory
from mockapi.app.core.errors import NotFoundError
from mockapi.app.schemas.resource import Envelope, ResourceIndex
from mockapi.app.services.interfaces import ResourceServiceInterface
from mockapi.app.services.resource_service_factory import ResourceServiceFactory

router = APIRouter()

FILTER_PARAM = re.compile(r"^filter\[([^\]]+)\]$")


def _service(resource: str, factory: ResourceServiceFactory) -> ResourceServiceInterface:
    # A name that is neither registered nor plural can never become a
    # service; other configuration errors surface as 500.
    if resource not in factory and not validate.is_plural(resource, False):
        raise NotFoundError(f"Unable to instantiate resource `{resource}` service")
    return factory.get(resource)


def _filter(request: Request) -> Union[str, Dict[str, Any], None]:
    """Collect ``filter[...]`` query parameters.

    Returns a comma separated id string for numeric keys, a mapping for
    named keys, or ``None`` when the request carries no filter.
    """
    criteria: Dict[str, Any] = {}
    ids: Dict[int, str] = {}
    for key, value in request.query_params.multi_items():
        match = FILTER_PARAM.match(key)
        if not match:
            continue
        name = match.group(1)
        if name.isdigit():
            ids[int(name)] = value
        else:
            criteria[name] = value
    if ids:
        return ",".join(ids[i] for i in sorted(ids))
    return criteria or None


@router.get("/", response_model=ResourceIndex)
def index(factory: ResourceServiceFactory = Depends(get_factory)) -> Dict[str, Any]:
    """List the resources known to the service factory."""
    return factory.index()


@router.options("/{resource}")
def resource_options(resource: str, factory: ResourceServiceFactory = Depends(get_factory)) -> Dict[str, Any]:
    return _service(resource, factory).options()


@router.get("/{resource}", response_model=Envelope, response_model_exclude_unset=True)
def list_objects(
    resource: str,
    request: Request,
    fields: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    sort: Optional[str] = Query(None),
    factory: ResourceServiceFactory = Depends(get_factory),
) -> Dict[str, Any]:
    """Return a page of objects, optionally filtered and projected."""
    service = _service(resource, factory)
    return service.get(_filter(request), fields, limit, offset, sort)


@router.get("/{resource}/{ids}", response_model=Envelope, response_model_exclude_unset=True)
def get_objects(
    resource: str,
    ids: str,
    fields: Optional[str] = Query(None),
    factory: ResourceServiceFactory = Depends(get_factory),
) -> Dict[str, Any]:
    """Return one object, or several for comma separated ids."""
    return _service(resource, factory).get(ids, fields)


@router.get("/{resource}/{ids}/{attrs}", response_model=Envelope, response_model_exclude_unset=True)
def get_attributes(
    resource: str,
    ids: str,
    attrs: str,
    factory: ResourceServiceFactory = Depends(get_factory),
) -> Dict[str, Any]:
    """Return one attribute value, or a projection for several attributes."""
    return _service(resource, factory).get(ids, attrs)


@router.post("/{resource}", status_code=status.HTTP_201_CREATED)
def create_objects(
    resource: str,
    request: Request,
    payload: Any = Body(...),
    factory: ResourceServiceFactory = Depends(get_factory),
) -> Any:
    """Create one object or a batch, optionally related to other objects."""
    return _service(resource, factory).post(payload, _filter(request))


@router.post("/{resource}/{ids}", status_code=status.HTTP_201_CREATED)
def create_objects_with_ids(
    resource: str,
    ids: str,
    payload: Any = Body(...),
    factory: ResourceServiceFactory = Depends(get_factory),
) -> Any:
    """Create objects under the given ids."""
    return _service(resource, factory).post(payload, ids)


@router.post("/{resource}/{ids}/{attrs}")
def add_attributes(
    resource: str,
    ids: str,
    attrs: str,
    payload: Any = Body(...),
    factory: ResourceServiceFactory = Depends(get_factory),
) -> Any:
    """Add attributes to existing objects."""
    return _service(resource, factory).post(payload, ids, attrs)
