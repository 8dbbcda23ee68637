import pytest
from fastapi.testclient import TestClient

from mockapi.app.core.bootstrap import get_factory
from mockapi.app.core.config import settings
from mockapi.app.main import app
from mockapi.app.providers.factory import ProviderFactory
from mockapi.app.providers.memory import MemoryResourceProvider
from mockapi.app.services.resource_service import ResourceService
from mockapi.app.services.resource_service_factory import ResourceServiceFactory

API = settings.api_prefix


def default_entry(service_class=ResourceService, endpoint=API):
    return (
        service_class,
        {
            "provider": (ProviderFactory, [(MemoryResourceProvider, {})]),
            "endpoint": endpoint,
        },
    )


@pytest.fixture()
def factory():
    return ResourceServiceFactory([default_entry()])


@pytest.fixture()
def posts(factory):
    return factory.get("posts")


@pytest.fixture()
def seeded_posts(posts):
    """25 posts with ids 1..25, names n0..n24, alternating kind."""
    posts.post([{"name": f"n{i}", "kind": "even" if i % 2 == 0 else "odd"} for i in range(25)])
    return posts


@pytest.fixture()
def client(factory):
    app.dependency_overrides[get_factory] = lambda: factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
