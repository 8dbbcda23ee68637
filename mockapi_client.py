"""Mockapi HTTP client.

A thin wrapper around ``requests`` mirroring the service calls of the
API: :meth:`MockapiClient.get` and :meth:`MockapiClient.post` accept
the same ``where``/``fields`` shapes as ``ResourceService`` and build
the matching URL.  Every call returns a tuple ``(data, error)``; on
success ``error`` is ``None``, on failure ``data`` is ``None`` and
``error`` is a dictionary with ``status_code`` and ``message``.

Example::

    client = MockapiClient(base_url="http://localhost:8000/api/v1")
    post, error = client.post("posts", {"title": "Hello"})
    comment, error = client.post("comments", {"text": "hi"}, {"posts": post["id"]})
    page, error = client.get("comments", {"posts": post["id"]}, limit=5)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


def _join(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _filter_params(where: Mapping[str, Any]) -> Dict[str, str]:
    return {f"filter[{k}]": _join(v) for k, v in where.items()}


class MockapiClient:
    """Client for a Mockapi server."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: URL the API router is mounted at, e.g.
                ``http://localhost:8000/api/v1``.
            api_key: Optional token sent as ``Authorization: Bearer``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        return self._send(method, f"{self.base_url}{path}", params=params, json_body=json_body)

    def _send(
        self, method: str, url: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    message = exc.response.json().get("detail") or ""
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _path(resource: str, ids: Any = None, fields: Any = None) -> str:
        path = f"/{quote(resource)}"
        if ids not in (None, "", [], ()):
            path += f"/{quote(_join(ids), safe=',')}"
            if fields:
                path += f"/{quote(_join(fields), safe=',')}"
        return path

    # ------------------------------------------------------------------
    # Resource operations
    # ------------------------------------------------------------------
    def index(self) -> Result:
        """Return the list of resources served by the API."""
        return self._request("GET", "/")

    def get(
        self,
        resource: str,
        where: Any = None,
        fields: Any = None,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
        sort: Optional[str] = None,
    ) -> Result:
        """Read objects; ``where`` is an id, an id list or a filter mapping."""
        params: Dict[str, Any] = {}
        ids = None
        if isinstance(where, Mapping):
            params.update(_filter_params(where))
        else:
            ids = where
        if fields and ids is None:
            params["fields"] = _join(fields)
        if limit:
            params["limit"] = limit
        if offset:
            params["offset"] = offset
        if sort:
            params["sort"] = sort
        return self._request("GET", self._path(resource, ids, fields), params=params or None)

    def post(self, resource: str, payload: Any, where: Any = None, fields: Any = None) -> Result:
        """Create objects, relate them (mapping ``where``) or add attributes."""
        params = None
        ids = None
        if isinstance(where, Mapping):
            params = _filter_params(where)
        else:
            ids = where
        return self._request("POST", self._path(resource, ids, fields), params=params, json_body=payload)

    def follow(self, link: str) -> Result:
        """Fetch a ``prev``/``next`` link returned in a response envelope."""
        return self._send("GET", self._absolute(link))

    def _absolute(self, link: str) -> str:
        if link.startswith(("http://", "https://")):
            return link
        parts = self.base_url.split("/", 3)
        origin = "/".join(parts[:3]) if len(parts) >= 3 else self.base_url
        return f"{origin}{link}"

    def pages(self, resource: str, where: Any = None, **kwargs: Any) -> Tuple[List[Any], Optional[Dict[str, Any]]]:
        """Collect every page of a listing by following ``next`` links."""
        items: List[Any] = []
        body, error = self.get(resource, where, **kwargs)
        while body is not None:
            data = body.get("data")
            items.extend(data if isinstance(data, list) else [data])
            link = (body.get("links") or {}).get("next")
            if not link:
                break
            body, error = self.follow(link)
        return items, error
