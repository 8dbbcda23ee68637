import pytest

from mockapi.app.core import inflect, validate
from mockapi.app.core.errors import ConfigurationError


@pytest.mark.parametrize(
    "plural, singular",
    [
        ("posts", "post"),
        ("comments", "comment"),
        ("categories", "category"),
        ("statuses", "status"),
        ("boxes", "box"),
        ("matches", "match"),
        ("addresses", "address"),
        ("houses", "house"),
        ("heroes", "hero"),
        ("wolves", "wolf"),
        ("people", "person"),
        ("shoes", "shoe"),
        ("quizzes", "quiz"),
        ("news", "news"),
        ("Users", "User"),
    ],
)
def test_singularize(plural, singular):
    assert inflect.singularize(plural) == singular


@pytest.mark.parametrize("word", ["posts", "people", "news", "categories"])
def test_is_plural(word):
    assert inflect.is_plural(word)


@pytest.mark.parametrize("word", ["post", "status", "address", "analysis", "s", ""])
def test_is_not_plural(word):
    assert not inflect.is_plural(word)


def test_ucfirst():
    assert inflect.ucfirst("post") == "Post"
    assert inflect.ucfirst("") == ""


def test_validation_raises_with_description():
    with pytest.raises(ConfigurationError, match="`resource` argument must be plural"):
        validate.is_plural("post", "`resource` argument")


def test_validation_returns_false_when_asked():
    assert validate.is_non_empty_string("", False) is False
    assert validate.is_url("not a url", False) is False


@pytest.mark.parametrize("url", ["/", "/api/v1", "http://localhost:8000/api", "https://example.com"])
def test_is_url(url):
    assert validate.is_url(url)


def test_require_attributes():
    with pytest.raises(ConfigurationError, match="provider"):
        validate.require_attributes(["resource", "provider"], {"resource": "posts"}, "Arguments")
