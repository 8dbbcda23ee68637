"""
Translation of resource errors into HTTP responses.

Services raise :class:`ResourceError` subclasses carrying a status
code.  The handler registered here turns them into ``{"detail": ...}``
JSON responses and logs them; server-side errors at ``ERROR`` level,
client errors at ``WARNING``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mockapi.app.core.errors import ResourceError

log = logging.getLogger("mockapi.errors")


async def resource_error_handler(request: Request, exc: ResourceError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    log.log(level, "%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResourceError, resource_error_handler)
