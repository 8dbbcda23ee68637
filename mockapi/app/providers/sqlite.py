"""
SQLite provider.

Objects are stored as JSON documents in the ``objects`` table created
by :func:`mockapi.app.core.db.init_db`.  A new connection is opened for
every operation, so one provider instance can be shared between
threads.  Storage failures surface as :class:`ProviderError`.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from mockapi.app.core.db import get_cursor, init_db
from mockapi.app.core.errors import ConflictError, ProviderError
from mockapi.app.providers.base import BaseResourceProvider

logger = logging.getLogger(__name__)


class SQLiteResourceProvider(BaseResourceProvider):
    """Stores one resource in a SQLite database file.

    Options: ``resource`` (required), ``endpoint`` and ``database``
    (path to the database file, defaults to ``settings.database_url``).
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        super().__init__(options, **kwargs)
        options = {**(options or {}), **kwargs}
        self.database: Optional[str] = options.get("database")
        with self._errors():
            init_db(self.database)

    @contextmanager
    def _errors(self) -> Iterator[None]:
        try:
            yield
        except sqlite3.IntegrityError as exc:
            raise ConflictError(f"{self.resource} object already exists") from exc
        except sqlite3.Error as exc:
            logger.error("SQLite error on %s: %s", self.resource, exc)
            raise ProviderError(f"Storage error: {exc}") from exc

    def _load(self, key: str) -> Optional[Dict[str, Any]]:
        with self._errors(), get_cursor(self.database) as cursor:
            row = cursor.execute(
                "SELECT body FROM objects WHERE resource = ? AND key = ?",
                (self.resource, key),
            ).fetchone()
        return json.loads(row["body"]) if row else None

    def _all(self) -> List[Dict[str, Any]]:
        with self._errors(), get_cursor(self.database) as cursor:
            rows = cursor.execute(
                "SELECT body FROM objects WHERE resource = ? ORDER BY seq",
                (self.resource,),
            ).fetchall()
        return [json.loads(row["body"]) for row in rows]

    def _insert(self, key: str, obj: Dict[str, Any]) -> None:
        with self._errors(), get_cursor(self.database) as cursor:
            cursor.execute(
                "INSERT INTO objects (resource, key, body) VALUES (?, ?, ?)",
                (self.resource, key, json.dumps(obj, default=str)),
            )

    def _update(self, key: str, obj: Dict[str, Any]) -> None:
        with self._errors(), get_cursor(self.database) as cursor:
            cursor.execute(
                "UPDATE objects SET body = ?, updated_at = CURRENT_TIMESTAMP WHERE resource = ? AND key = ?",
                (json.dumps(obj, default=str), self.resource, key),
            )
