
import pytest

from mockapi.app.core.bootstrap import build_factory, factory_config
from mockapi.app.core.config import Settings
from mockapi.app.core.db import get_database_path
from mockapi.app.core.errors import ConfigurationError, NotFoundError
from mockapi.app.providers.memory import MemoryResourceProvider
from mockapi.app.providers.sqlite import SQLiteResourceProvider
from mockapi.app.services.resource_service import ResourceService


def test_memory_backend_with_whitelist():
    factory = build_factory(Settings(storage_backend="memory", resources=["posts"], api_prefix="/api"))
    posts = factory.get("posts")
    assert isinstance(posts.provider, MemoryResourceProvider)
    assert posts.options()["endpoint"] == "/api/posts"
    with pytest.raises(NotFoundError):
        factory.get("comments")


def test_sqlite_backend(tmp_path):
    database = str(tmp_path / "api.db")
    factory = build_factory(Settings(storage_backend="sqlite", database_url=database, resources=[]))
    posts = factory.get("posts")
    assert isinstance(posts.provider, SQLiteResourceProvider)
    assert posts.provider.database == database
    assert not factory.strict


def test_page_size_is_applied_per_factory():
    factory = build_factory(Settings(storage_backend="memory", resources=[], page_size=3))
    assert factory.get("posts").limit == 3
    assert ResourceService.limit == 10


def test_default_page_size_keeps_service_class():
    service_class, _ = factory_config(Settings(storage_backend="memory", resources=[], page_size=10))[0]
    assert service_class is ResourceService


def test_unknown_backend():
    with pytest.raises(ConfigurationError, match="Unknown storage backend"):
        build_factory(Settings(storage_backend="redis", resources=[]))


def test_database_path_resolution(tmp_path):
    assert get_database_path(str(tmp_path / "a.db")) == str(tmp_path / "a.db")
    assert get_database_path("relative.db").endswith("relative.db")


def test_in_memory_sqlite_database_is_rejected():
    with pytest.raises(ConfigurationError, match="needs a database file"):
        get_database_path(":memory:")
    with pytest.raises(ConfigurationError):
        SQLiteResourceProvider(resource="posts", database=":memory:")
