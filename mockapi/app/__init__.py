"""
Application package initializer.

``core`` holds configuration, logging, storage wiring and the error
taxonomy; ``services`` the resource semantics; ``providers`` the
bundled storage backends; ``api`` the HTTP routes.
"""

from .main import app  # noqa: F401
