"""Errors that map directly onto client responses."""
from __future__ import annotations


class ApiError(RuntimeError):
    """Raised when a request must be answered with a JSON error body."""

    status_code = 400
    message = "Bad Request"

    def __init__(self) -> None:
        super().__init__(self.message)


class RateLimitExceeded(ApiError):
    status_code = 429
    message = "Too Many Requests"


class Unauthorized(ApiError):
    status_code = 401
    message = "Unauthorized"
