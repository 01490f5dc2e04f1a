"""Typed failures of the connection request state machine."""

from __future__ import annotations


class ConnectionRequestError(Exception):
    """Base class; carries a kind, a readable message and a suggested HTTP status."""

    kind: str = "error"
    status_code: int = 500
    message: str = "Connection request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class InvalidRequest(ConnectionRequestError):
    kind = "invalid_request"
    status_code = 400
    message = "Cannot send connection request to yourself"


class Forbidden(ConnectionRequestError):
    kind = "forbidden"
    status_code = 403
    message = "You cannot send a connection request to this user"


class NotFound(ConnectionRequestError):
    kind = "not_found"
    status_code = 404
    message = "Connection request not found or already processed"


class Conflict(ConnectionRequestError):
    kind = "conflict"
    status_code = 409
    message = "A connection request already exists"


class RateLimited(ConnectionRequestError):
    kind = "rate_limited"
    status_code = 429

    def __init__(self, days_remaining: int) -> None:
        self.days_remaining = days_remaining
        super().__init__(f"You cannot send another request for {days_remaining} more days")
