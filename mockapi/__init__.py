"""
Top-level package for Mockapi.

All functionality lives in submodules under ``app``, e.g.
``mockapi.app.main`` for the ASGI application.
"""

__all__ = []
