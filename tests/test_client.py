import pytest
import requests

from mockapi_client import MockapiClient

from conftest import API


class _Response:
    """Wraps a TestClient response in the shape ``requests`` callers expect."""

    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.content = response.content
        self.text = response.text

    def json(self):
        return self._response.json()

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class AppSession:
    def __init__(self, client):
        self.client = client
        self.calls = []

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append((method, url, params, headers))
        return _Response(self.client.request(method, url, params=params, json=json, headers=headers))


class FailingSession:
    def request(self, **kwargs):
        raise requests.ConnectionError("connection refused")


@pytest.fixture()
def session(client):
    return AppSession(client)


@pytest.fixture()
def api(session):
    return MockapiClient(base_url=f"http://testserver{API}/", session=session)


def test_create_and_read(api):
    assert api.post("posts", {"title": "Hello"}) == ({"title": "Hello", "id": 1}, None)
    assert api.get("posts", 1) == ({"data": {"title": "Hello", "id": 1}}, None)
    assert api.get("posts", 1, "title") == ({"data": "Hello"}, None)


def test_paths_and_parameters(api, session):
    api.post("posts", [{"title": "a"}, {"title": "b"}])
    data, error = api.get("posts", [1, 2], ["title"])
    assert error is None
    assert data["data"] == [{"title": "a"}, {"title": "b"}]
    assert session.calls[-1][1] == f"http://testserver{API}/posts/1,2/title"

    api.get("posts", {"title": ["a", "b"]}, "title", limit=1, sort="-id")
    assert session.calls[-1][2] == {"filter[title]": "a,b", "fields": "title", "limit": 1, "sort": "-id"}


def test_relations_and_attributes(api):
    api.post("posts", {"title": "p"})
    comment, error = api.post("comments", {"text": "hi"}, {"posts": 1})
    assert error is None
    assert comment["posts"] == [1]

    assert api.post("posts", "Renamed", [1], "title") == ("Renamed", None)
    listed, _ = api.get("comments", {"posts": 1})
    assert [c["id"] for c in listed["data"]] == [comment["id"]]


def test_pages_follow_next_links(api):
    api.post("posts", [{"n": i} for i in range(12)])
    items, error = api.pages("posts", limit=5)
    assert error is None
    assert [o["n"] for o in items] == list(range(12))


def test_error_carries_status_and_detail(api):
    data, error = api.get("posts", 99)
    assert data is None
    assert error == {"status_code": 404, "message": "posts object with ID 99 not found"}


def test_api_key_is_sent_as_bearer_token(session):
    MockapiClient(base_url=f"http://testserver{API}", api_key="secret", session=session).index()
    assert session.calls[-1][3] == {"Authorization": "Bearer secret"}


def test_connection_error_is_reported():
    api = MockapiClient(base_url="http://unreachable", session=FailingSession())
    assert api.index() == (None, {"status_code": None, "message": "connection refused"})


def test_absolute_links_are_used_as_is():
    api = MockapiClient(base_url="http://host:8000/api/v1")
    assert api._absolute("/api/v1/posts?offset=10") == "http://host:8000/api/v1/posts?offset=10"
    assert api._absolute("https://other/posts") == "https://other/posts"
