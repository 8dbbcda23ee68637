"""
Error taxonomy shared by services, providers and the HTTP layer.

Every error carries an HTTP-like ``status_code`` so that the API layer
can translate it into a response without knowing which component
raised it.  Services never catch these errors; they propagate
unchanged to the caller.
"""


class ResourceError(Exception):
    """Base class for all resource related errors."""

    status_code: int = 500

    def __init__(self, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(ResourceError):
    """Invalid constructor arguments or malformed service descriptors."""

    status_code = 500


class BadRequestError(ResourceError):
    """The client supplied an invalid payload or argument combination."""

    status_code = 400


class NotFoundError(ResourceError):
    """A requested object, attribute or service does not exist."""

    status_code = 404


class ConflictError(ResourceError):
    """An object with the given id already exists."""

    status_code = 409


class ProviderError(ResourceError):
    """Failure raised by a storage provider."""

    status_code = 502
