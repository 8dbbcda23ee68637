import pytest

from mockapi.app.core.errors import (
    BadRequestError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ProviderError,
)
from mockapi.app.providers.memory import MemoryResourceProvider
from mockapi.app.services.resource_service import ResourceService
from mockapi.app.services.resource_service_factory import ResourceServiceFactory

from conftest import default_entry


# --- create -----------------------------------------------------------------


def test_created_object_round_trips(posts):
    created = posts.post({"name": "a"})
    assert created == {"name": "a", "id": 1}
    assert posts.get(created["id"])["data"]["name"] == "a"


def test_batch_create_returns_list(posts):
    created = posts.post([{"name": "a"}, {"name": "b"}])
    assert [o["id"] for o in created] == [1, 2]


def test_payload_is_not_mutated(posts):
    payload = {"name": "a"}
    posts.post(payload)
    assert payload == {"name": "a"}


@pytest.mark.parametrize("payload", [None, {}, [], ""])
def test_empty_payload_is_rejected(posts, payload):
    with pytest.raises(BadRequestError, match="requires payload"):
        posts.post(payload)


@pytest.mark.parametrize("payload", [[{"a": 1}, 2], "text", 5])
def test_payload_must_be_objects(posts, payload):
    with pytest.raises(BadRequestError, match="Payload must be object or array of objects"):
        posts.post(payload)


def test_existing_id_conflicts(posts):
    posts.post({"id": 5, "name": "x"})
    with pytest.raises(ConflictError, match="Post with ID 5 already exists"):
        posts.post({"id": 5, "name": "y"})
    assert posts.get(5)["data"]["name"] == "x"


def test_duplicate_ids_in_batch_conflict_before_anything_is_created(posts):
    with pytest.raises(ConflictError):
        posts.post([{"id": 7, "name": "a"}, {"id": 7, "name": "b"}])
    assert not posts.provider.exists(7)


class FailingOnSecondAdd(MemoryResourceProvider):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.adds = 0

    def add(self, obj):
        self.adds += 1
        if self.adds == 2:
            raise ProviderError("Storage error: disk full")
        return super().add(obj)


def test_batch_create_keeps_objects_stored_before_a_failure():
    posts = ResourceService(resource="posts", provider=FailingOnSecondAdd(resource="posts"))
    with pytest.raises(ProviderError, match="disk full"):
        posts.post([{"title": "a"}, {"title": "b"}, {"title": "c"}])

    assert posts.get(1)["data"] == {"title": "a", "id": 1}
    assert not posts.provider.exists(2)
    assert posts.provider.adds == 2


def test_positional_ids_are_assigned(posts):
    created = posts.post([{"name": "a"}, {"name": "b"}], "10,11")
    assert [o["id"] for o in created] == ["10", "11"]
    assert posts.get("10")["data"]["name"] == "a"
    assert posts.get(11)["data"]["name"] == "b"


def test_positional_ids_accept_matching_payload_ids(posts):
    assert posts.post({"id": 4, "name": "a"}, "4")["id"] == 4


def test_positional_id_count_must_match(posts):
    with pytest.raises(BadRequestError, match="count matches"):
        posts.post([{"name": "a"}], "1,2")


def test_positional_ids_must_match_payload_ids(posts):
    with pytest.raises(BadRequestError, match="make sure they match"):
        posts.post({"id": 3, "name": "a"}, "4")


def test_positional_id_that_exists_conflicts(posts):
    posts.post({"name": "a"})
    with pytest.raises(ConflictError):
        posts.post({"name": "b"}, [1])


def test_relation_where_must_not_use_id(posts):
    with pytest.raises(ConfigurationError, match="Sure about object type `id`"):
        posts.post({"a": 1}, {"id": 3})


# --- attributes ---------------------------------------------------------------


def test_single_attribute_value(seeded_posts):
    assert seeded_posts.post("hello", [1], "title") == "hello"
    assert seeded_posts.get(1, "title") == {"data": "hello"}


def test_single_attribute_is_unwrapped_from_object(seeded_posts):
    seeded_posts.post({"title": "x"}, "1", "title")
    assert seeded_posts.get(1, "title") == {"data": "x"}


def test_several_attributes_on_several_ids(seeded_posts):
    assert seeded_posts.post({"a": 1, "b": 2}, "1,2", "a,b") == ["1", "2"]
    assert seeded_posts.get(2, "a,b")["data"] == {"a": 1, "b": 2}


def test_attributes_must_match_fields(seeded_posts):
    with pytest.raises(BadRequestError, match="Fields must match payload object attributes"):
        seeded_posts.post({"a": 1}, "1,2", "a,b")


def test_attributes_on_missing_object(seeded_posts):
    with pytest.raises(NotFoundError, match="Post with ID 99 not found"):
        seeded_posts.post({"a": 1, "b": 2}, "1,99", "a,b")


def test_attributes_require_target(seeded_posts):
    with pytest.raises(BadRequestError, match="undefined object"):
        seeded_posts.post({"a": 1}, None, "a")


def test_attributes_on_filtered_objects(seeded_posts):
    ids = seeded_posts.post({"flag": True, "x": 1}, {"kind": "odd"}, "flag,x")
    assert ids == [2, 4, 6, 8, 10, 12, 14, 16, 18, 20, 22, 24]
    assert seeded_posts.get({"flag": True}, "id", 50)["data"] == [{"id": i} for i in ids]


def test_list_attributes_accumulate(seeded_posts):
    seeded_posts.post(["t1"], [1], "tags")
    seeded_posts.post(["t2", "t1"], [1], "tags")
    assert seeded_posts.get(1, "tags") == {"data": ["t1", "t2"]}


# --- relations ----------------------------------------------------------------


def test_relation_is_created_on_both_sides(factory):
    posts = factory.get("posts")
    posts.post([{"title": f"p{i}"} for i in range(7)])
    comments = factory.get("comments")

    comment = comments.post({"text": "hi"}, {"posts": 7})

    assert comment == {"text": "hi", "posts": [7], "id": 1}
    assert posts.get(7, "comments") == {"data": [1]}


def test_batch_relation_links_every_created_object(factory):
    factory.get("posts").post({"title": "p"})
    comments = factory.get("comments")

    created = comments.post([{"text": "a"}, {"text": "b"}], {"posts": 1})

    assert [c["posts"] for c in created] == [[1], [1]]
    assert factory.get("posts").get(1, "comments") == {"data": [1, 2]}


def test_relation_to_missing_object_creates_nothing(factory):
    comments = factory.get("comments")
    factory.get("posts").post({"title": "p"})
    with pytest.raises(NotFoundError):
        comments.post({"text": "hi"}, {"posts": 99})
    assert not comments.provider.exists(1)


def test_relation_selector_must_select_one_object(factory):
    factory.get("posts").post([{"title": "p"}, {"title": "p"}])
    with pytest.raises(BadRequestError, match="single post"):
        factory.get("comments").post({"text": "hi"}, {"posts": {"title": "p"}})


def test_fan_out_calls_each_peer_once():
    calls = []

    class RecordingService(ResourceService):
        def post(self, payload, where=None, fields=None):
            calls.append((self.resource, fields))
            return super().post(payload, where, fields)

    factory = ResourceServiceFactory([default_entry(RecordingService)])
    factory.get("posts").post({"title": "p"})
    factory.get("users").post({"name": "u"})
    calls.clear()

    factory.get("comments").post({"text": "hi"}, {"posts": 1, "users": 1})

    assert calls == [("comments", None), ("posts", "comments"), ("users", "comments")]
    assert factory.get("users").get(1, "comments") == {"data": [1]}


def test_relations_need_peer_services():
    comments = ResourceService(resource="comments", provider=MemoryResourceProvider(resource="comments"))
    with pytest.raises(ConfigurationError, match="no peer services"):
        comments.post({"text": "hi"}, {"posts": 1})
