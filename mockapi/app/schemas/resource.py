"""
Pydantic schemas for resource services.

``ServiceArguments`` validates the constructor arguments of a
resource service.  ``Envelope`` and ``ResourceIndex`` describe what
the HTTP layer returns: every read is wrapped in ``{data, links?}``
and the API root lists the resources the factory knows about.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mockapi.app.core import validate
from mockapi.app.core.errors import ConfigurationError
from mockapi.app.services.interfaces import ResourceProvider, ResourceProviderFactory


class ServiceArguments(BaseModel):
    """Arguments accepted by ``ResourceService``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    resource: str
    provider: Any
    services: Any = None
    limit: Optional[int] = Field(None, gt=0)

    @field_validator("resource", mode="before")
    @classmethod
    def validate_resource(cls, v):
        validate.is_non_empty_string(v, "`resource` argument")
        validate.is_plural(v, "`resource` argument")
        return v

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v):
        if not isinstance(v, (ResourceProvider, ResourceProviderFactory)):
            raise ConfigurationError(
                "Resource provider must implement `ResourceProvider` or `ResourceProviderFactory`."
            )
        return v

    @field_validator("services")
    @classmethod
    def validate_services(cls, v):
        if v is not None and not callable(getattr(v, "get", None)):
            raise ConfigurationError("`services` argument must expose get(resource)")
        return v

    @classmethod
    def parse(cls, args: dict) -> "ServiceArguments":
        validate.require_attributes(("resource", "provider"), args, "Resource service arguments")
        try:
            return cls(**args)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid resource service arguments: {exc}") from exc


class Links(BaseModel):
    prev: Optional[str] = None
    next: Optional[str] = None


class Envelope(BaseModel):
    """Response wrapper for reads."""

    data: Any
    links: Optional[Links] = None


class ResourceLink(BaseModel):
    type: str
    link: str


class ResourceIndex(BaseModel):
    endpoint: str
    requests: str
    methods: List[str]
    resources: List[ResourceLink]
