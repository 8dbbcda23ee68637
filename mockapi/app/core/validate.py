"""
Assertion helpers used while validating service configuration.

Each helper returns ``True`` when the value passes.  When it does not,
the helper raises :class:`ConfigurationError` with ``description`` in
the message, or returns ``False`` if ``description`` is ``False``
(useful for branching on the shape of a configuration value).
"""

import re
from typing import Any, Iterable, Mapping, Union

from . import inflect
from .errors import ConfigurationError

_URL_RE = re.compile(r"^(https?://[^\s/]+)?(/[^\s]*)?$")


def _fail(description: Union[str, bool], reason: str) -> bool:
    if description is False:
        return False
    raise ConfigurationError(f"{description} {reason}".strip())


def require_attributes(required: Iterable[str], args: Mapping[str, Any], description: str) -> bool:
    missing = [name for name in required if name not in args]
    if missing:
        raise ConfigurationError(
            f"{description} missing required attribute(s): {', '.join(missing)}"
        )
    return True


def is_non_empty_string(value: Any, description: Union[str, bool] = "Value") -> bool:
    if isinstance(value, str) and value.strip():
        return True
    return _fail(description, "must be a non-empty string")


def is_plural(value: str, description: Union[str, bool] = "Value") -> bool:
    if inflect.is_plural(value):
        return True
    return _fail(description, f"must be plural, got `{value}`")


def is_url(value: Any, description: Union[str, bool] = "Value") -> bool:
    """Accept absolute paths (``/api``) and http(s) URLs."""
    if isinstance(value, str) and value and _URL_RE.match(value):
        return True
    return _fail(description, "must be a URL or an absolute path")
