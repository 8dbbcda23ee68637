"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can be started without any configuration at all; in that case it
serves every resource name from a SQLite file next to the package.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Mockapi")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    # Level of the ``mockapi.errors`` logger that records HTTP error responses.
    error_log_level: str = os.getenv("ERROR_LOG_LEVEL", "WARNING")

    # Prefix under which the resource router is mounted.  Links emitted
    # by the services are built from this prefix, so it must match the
    # public path of the API.
    api_prefix: str = os.getenv("API_PREFIX", "/api/v1")

    # ``sqlite`` persists objects in ``database_url``; ``memory`` keeps
    # them for the lifetime of the process only.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite")

    # Path to the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "mockapi.db")

    # Comma-separated whitelist of resource names.  When empty, any
    # plural resource name is served.  Example: RESOURCES="posts,comments".
    resources: List[str] = field(default_factory=lambda: _split(os.getenv("RESOURCES", "")))

    # Default page size used when a request does not specify ``limit``.
    page_size: int = int(os.getenv("PAGE_SIZE", "10"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
