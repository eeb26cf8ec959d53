"""Message templates for approval, notification and survey requests.

Rendering is pure: the same request and clock value always produce the same
RenderedMessage. Which template applies is decided by the request model type.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import IntEnum
from typing import TYPE_CHECKING

from chat_gateway_api import Control, ControlStyle, MessageField, RenderedMessage
from webhook_service.controls import APPROVE, CONFIRM, REJECT, SURVEY, encode_control_id
from webhook_service.models import ApprovalRequest, NotificationRequest, SurveyRequest

if TYPE_CHECKING:
    from webhook_service.models import FieldInput, MessageRequest

MAX_CONTROLS = 5
MAX_LABEL_LENGTH = 80

__all__ = [
    "MAX_CONTROLS",
    "MessageColor",
    "render",
    "render_approval",
    "render_notification",
    "render_survey",
]


class MessageColor(IntEnum):
    """Accent color per message type."""

    APPROVAL = 0x3498DB
    NOTIFICATION = 0xF39C12
    SURVEY = 0x9B59B6


APPROVAL_TITLE = "Needs approval"
APPROVAL_DESCRIPTION = "Please review the following request."
NOTIFICATION_TITLE = "Notification"
NOTIFICATION_DESCRIPTION = "This is a notification."
SURVEY_TITLE = "Survey"
SURVEY_DESCRIPTION = "Please choose your answer."

APPROVAL_ICON = "📋"
NOTIFICATION_ICON = "📢"
SURVEY_ICON = "📊"

APPROVE_LABEL = "✅ Approve"
REJECT_LABEL = "❌ Reject"
CONFIRM_LABEL = "👍 Mark as read"


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


def render(
    request: MessageRequest,
    *,
    now: datetime | None = None,
) -> RenderedMessage:
    """Render any supported request.

    Args:
        request: Validated approval, notification or survey request.
        now: Timestamp to stamp on the message; defaults to the current UTC time.

    Returns:
        Message ready for a Gateway channel.

    """
    if isinstance(request, ApprovalRequest):
        return render_approval(request, now=now)
    if isinstance(request, NotificationRequest):
        return render_notification(request, now=now)
    if isinstance(request, SurveyRequest):
        return render_survey(request, now=now)
    msg = f"Unsupported request: {type(request).__name__}"
    raise TypeError(msg)


def render_approval(request: ApprovalRequest, *, now: datetime | None = None) -> RenderedMessage:
    """Approve/reject message for ``request.id``."""
    return _base_message(
        request,
        icon=APPROVAL_ICON,
        title=APPROVAL_TITLE,
        description=APPROVAL_DESCRIPTION,
        color=MessageColor.APPROVAL,
        now=now,
        controls=[
            Control(id=encode_control_id(APPROVE, request.id), label=APPROVE_LABEL, style=ControlStyle.SUCCESS),
            Control(id=encode_control_id(REJECT, request.id), label=REJECT_LABEL, style=ControlStyle.DANGER),
        ],
    )


def render_notification(request: NotificationRequest, *, now: datetime | None = None) -> RenderedMessage:
    """Notification with a single acknowledge control."""
    return _base_message(
        request,
        icon=NOTIFICATION_ICON,
        title=NOTIFICATION_TITLE,
        description=NOTIFICATION_DESCRIPTION,
        color=MessageColor.NOTIFICATION,
        now=now,
        controls=[
            Control(id=encode_control_id(CONFIRM, request.id), label=CONFIRM_LABEL, style=ControlStyle.PRIMARY),
        ],
    )


def render_survey(request: SurveyRequest, *, now: datetime | None = None) -> RenderedMessage:
    """Survey with one control per option.

    Only the first ``MAX_CONTROLS`` options are rendered since the platform
    allows at most five buttons per row; the rest are dropped.
    """
    controls = [
        Control(
            id=encode_control_id(SURVEY, request.id, index),
            label=option.label[:MAX_LABEL_LENGTH],
            style=ControlStyle.SECONDARY,
        )
        for index, option in enumerate(request.options[:MAX_CONTROLS])
    ]
    return _base_message(
        request,
        icon=SURVEY_ICON,
        title=SURVEY_TITLE,
        description=SURVEY_DESCRIPTION,
        color=MessageColor.SURVEY,
        now=now,
        controls=controls,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _base_message(  # noqa: PLR0913
    request: MessageRequest,
    *,
    icon: str,
    title: str,
    description: str,
    color: MessageColor,
    now: datetime | None,
    controls: list[Control],
) -> RenderedMessage:
    """Apply title/description defaults, prefix the title icon and copy fields in order."""
    return RenderedMessage(
        title=f"{icon} {request.title or title}",
        description=request.description or description,
        color=int(color),
        timestamp=now or datetime.now(UTC),
        fields=[_to_field(field) for field in request.fields],
        controls=controls,
    )


def _to_field(field: FieldInput) -> MessageField:
    return MessageField(name=field.name, value=field.value, inline=field.inline)
