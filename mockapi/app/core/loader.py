"""Import helpers for classes named in configuration."""

import importlib
from typing import Any

from .errors import ConfigurationError
from . import validate


def load_class(value: Any, description: str) -> type:
    """Return the class named by ``value``.

    ``value`` is either a class or a dotted path such as
    ``"package.module:Class"`` or ``"package.module.Class"``.
    """
    if isinstance(value, type):
        return value
    validate.is_non_empty_string(value, description)
    module_name, sep, attr = value.partition(":")
    if not sep:
        module_name, _, attr = module_name.rpartition(".")
    try:
        return getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError, ValueError) as exc:
        raise ConfigurationError(f"Missing {description} `{value}`") from exc
