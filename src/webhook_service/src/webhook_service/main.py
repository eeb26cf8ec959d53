"""FastAPI webhook service for the workflow bridge.

Receives message requests from the automation source, renders them and posts
them to a chat channel through the injected Gateway. Also exposes a liveness
route reporting uptime and connected guilds.
"""

from __future__ import annotations

import hmac
import logging
import time
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from webhook_service.errors import BadRequest, InternalError, NotFound, Unauthorized, WebhookError
from webhook_service.models import REQUEST_MODELS, ErrorResponse, StatusResponse, WebhookRequest, WebhookResponse
from webhook_service.renderer import render

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from chat_gateway_api import Gateway
    from webhook_service.config import Settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("webhook_service")

STATUS_TEXT = "Discord bot is running"
_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {"model": ErrorResponse} for status in (400, 401, 404, 500)
}

router = APIRouter()


def create_app(
    gateway: Gateway,
    settings: Settings,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    """Build the HTTP app around an already constructed gateway.

    Args:
        gateway: Connection to the chat platform used for every request.
        settings: Process settings; only the webhook secret is read here.
        clock: Monotonic clock uptime is measured with.

    Returns:
        Configured FastAPI application.

    """
    app = FastAPI(title="Workflow Bridge", version="0.1.0")
    app.state.gateway = gateway
    app.state.settings = settings
    app.state.clock = clock
    app.state.started_at = clock()
    app.include_router(router)
    app.add_exception_handler(WebhookError, _webhook_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    return app


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/")
async def status(request: Request) -> StatusResponse:
    """Return uptime in whole seconds and the number of connected guilds."""
    gateway: Gateway = request.app.state.gateway
    uptime = int(request.app.state.clock() - request.app.state.started_at)
    return StatusResponse(status=STATUS_TEXT, uptime=uptime, guilds=gateway.guild_count)


@router.post("/webhook", responses=_ERROR_RESPONSES)
async def webhook(request: Request, payload: dict[str, Any] = Body(...)) -> WebhookResponse:  # noqa: B008
    """Render the requested message and post it to the target channel."""
    settings: Settings = request.app.state.settings
    try:
        return await handle_webhook(
            payload,
            gateway=request.app.state.gateway,
            expected_secret=settings.webhook_secret,
        )
    except WebhookError:
        raise
    except Exception as exc:
        logger.exception("Unexpected webhook failure")
        raise InternalError("Internal server error.") from exc  # noqa: TRY003, EM101


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


async def handle_webhook(
    payload: Mapping[str, Any],
    *,
    gateway: Gateway,
    expected_secret: str,
) -> WebhookResponse:
    """Validate one webhook call and send exactly one message on success.

    Args:
        payload: Raw JSON object posted by the caller.
        gateway: Gateway used to resolve the channel and send the message.
        expected_secret: Shared secret the caller must present.

    Returns:
        Identifier of the sent message and the channel display name.

    Raises:
        Unauthorized: The secret does not match.
        BadRequest: Required fields are missing, the type is unknown or data is invalid.
        NotFound: The channel cannot be resolved.
        InternalError: The gateway failed while resolving or sending.

    """
    if not _secret_matches(payload.get("secret"), expected_secret):
        raise Unauthorized("Unauthorized.")  # noqa: TRY003, EM101

    try:
        envelope = WebhookRequest.model_validate(payload)
    except ValidationError as exc:
        raise BadRequest("Malformed request body.") from exc  # noqa: TRY003, EM101

    if not envelope.channel_id or not envelope.type or not envelope.data:
        raise BadRequest("Missing required parameters: channelId, type and data.")  # noqa: TRY003, EM101

    model = REQUEST_MODELS.get(envelope.type)
    if model is None:
        raise BadRequest(f"Unsupported message type: {envelope.type}")  # noqa: TRY003, EM102

    try:
        message_request = model.model_validate({**envelope.data, "type": envelope.type})
    except ValidationError as exc:
        raise BadRequest(f"Invalid {envelope.type} data: {_describe(exc)}") from exc  # noqa: TRY003, EM102

    message = render(message_request)

    try:
        channel = await gateway.fetch_channel(envelope.channel_id)
    except Exception as exc:
        logger.exception("Failed to resolve channel %s", envelope.channel_id)
        raise InternalError("Internal server error.") from exc  # noqa: TRY003, EM101
    if channel is None:
        raise NotFound(f"Channel not found: {envelope.channel_id}")  # noqa: TRY003, EM102

    try:
        message_id = await channel.send(message)
    except Exception as exc:
        logger.exception("Failed to send %s message to %s", envelope.type, channel.name)
        raise InternalError("Internal server error.") from exc  # noqa: TRY003, EM101

    logger.info("Sent %s message %s to #%s", envelope.type, message_id, channel.name)
    return WebhookResponse(message_id=message_id, channel_name=channel.name)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _secret_matches(candidate: object, expected: str) -> bool:
    """Compare secrets in constant time."""
    if not isinstance(candidate, str):
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def _describe(exc: ValidationError) -> str:
    """Summarize a validation error as ``loc: message`` pairs."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(item) for item in error["loc"]) or "data"
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts)


async def _webhook_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Render WebhookError subclasses as ``{"error": ...}``."""
    assert isinstance(exc, WebhookError)
    if exc.status_code >= 500:  # noqa: PLR2004
        logger.error("Webhook failed: %s", exc.message)
    else:
        logger.warning("Webhook rejected (%s): %s", int(exc.status_code), exc.message)
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=exc.message).model_dump())


async def _validation_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Reject bodies that are not a JSON object with a 400."""
    logger.warning("Webhook body rejected: %s", exc)
    return JSONResponse(
        status_code=BadRequest.status_code,
        content=ErrorResponse(error="Request body must be a JSON object.").model_dump(),
    )
