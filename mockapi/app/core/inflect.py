"""
English singular/plural helpers for resource names.

Resource names are plural nouns (``posts``, ``categories``) and the
services derive the singular form for messages and labels.  Word
transformation is delegated to the ``inflection`` package.
"""

import inflection


def singularize(word: str) -> str:
    """Return the singular form of ``word``."""
    return inflection.singularize(word)


def is_plural(word: str) -> bool:
    """Return ``True`` if ``word`` is a plural noun with a non-empty singular."""
    singular = singularize(word)
    if not singular.strip():
        return False
    return singular != word or inflection.pluralize(singular) == word


def ucfirst(word: str) -> str:
    """Upper-case the first character only."""
    return word[:1].upper() + word[1:]
