# Error taxonomy for directory listing requests.
# Created: 2026-10-19
#
# Every terminal failure is an HTTPException carrying its status code, so the
# enclosing FastAPI/Starlette exception middleware renders it. "Not found" is
# never an error here: the middleware hands the request to the next app.

from __future__ import annotations

from fastapi import HTTPException


class ServeIndexError(HTTPException):
    """Base class for listing failures. Subclasses fix ``status_code``."""

    status_code = 500

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail)


class BadRequest(ServeIndexError):
    """Malformed percent-encoding or a NUL byte in the request path."""

    status_code = 400


class Forbidden(ServeIndexError):
    """The request path resolves outside the configured root."""

    status_code = 403


class NotAcceptable(ServeIndexError):
    status_code = 406


class PathTooLong(ServeIndexError):
    status_code = 414


class InternalError(ServeIndexError):
    """Any other filesystem or render failure."""

    status_code = 500
