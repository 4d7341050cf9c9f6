"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations


class PortalError(Exception):
    """Base class; carries the message and HTTP status sent to the client."""

    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidInput(PortalError):
    status_code = 400
    default_message = "Invalid input"


class Unauthorized(PortalError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid credentials"


class Forbidden(PortalError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found"


class Conflict(PortalError):
    status_code = 409
    default_message = "Conflict"


class InUse(PortalError):
    """Category deletion blocked by news items still referencing it."""

    status_code = 400
    default_message = "Category is in use"


class RateLimited(PortalError):
    status_code = 429
    default_message = "Too many requests. Try again shortly."
