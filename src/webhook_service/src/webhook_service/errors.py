"""Error taxonomy for the webhook endpoint."""

from __future__ import annotations

from http import HTTPStatus

__all__ = ["BadRequest", "InternalError", "NotFound", "Unauthorized", "WebhookError"]


class WebhookError(Exception):
    """Base error carrying the HTTP status and the short message returned to the caller."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        """Store the caller-facing message."""
        super().__init__(message)
        self.message = message


class Unauthorized(WebhookError):
    """The shared secret did not match."""

    status_code = HTTPStatus.UNAUTHORIZED


class BadRequest(WebhookError):
    """The request is missing fields or uses an unsupported message type."""

    status_code = HTTPStatus.BAD_REQUEST


class NotFound(WebhookError):
    """The target channel could not be resolved."""

    status_code = HTTPStatus.NOT_FOUND


class InternalError(WebhookError):
    """Unexpected failure while resolving the channel or sending the message."""
