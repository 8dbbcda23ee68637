"""
Top-level router for version 1 of the API.

All resources share the generic routes in ``endpoints.resources``;
which resource names actually resolve is decided by the service
factory configured in ``core.bootstrap``.
"""

from fastapi import APIRouter

from .endpoints import resources

router = APIRouter()

router.include_router(resources.router, tags=["resources"])
