"""Outbound callback to the automation source."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests

if TYPE_CHECKING:
    from webhook_service.models import CallbackPayload

logger = logging.getLogger("discord_listener.callback")

DEFAULT_TIMEOUT_SECONDS = 30.0


class CallbackUnconfirmedError(RuntimeError):
    """The callback was not acknowledged with a success status.

    Attributes:
        status_code: HTTP status returned by the destination, or None on transport failure.

    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Record the failure reason and status code."""
        super().__init__(message)
        self.status_code = status_code


def send_callback(
    url: str,
    payload: CallbackPayload,
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> None:
    """POST the payload as JSON, once.

    Args:
        url: Callback destination.
        payload: Decision to deliver.
        timeout_seconds: Transport timeout for the request.

    Raises:
        CallbackUnconfirmedError: On a non-2xx status or any transport failure.

    """
    try:
        response = requests.post(url, json=payload.to_json(), timeout=timeout_seconds)
    except requests.RequestException as exc:
        msg = f"Callback request failed: {exc}"
        raise CallbackUnconfirmedError(msg) from exc

    if not response.ok:
        msg = f"Callback returned HTTP {response.status_code}"
        raise CallbackUnconfirmedError(msg, status_code=response.status_code)

    logger.info("Callback accepted with HTTP %s", response.status_code)
