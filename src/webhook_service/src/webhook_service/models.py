"""Pydantic schemas for the webhook endpoint and the outbound callback."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from webhook_service.controls import CONTROL_ID_SEPARATOR

MAX_SUBJECT_ID_LENGTH = 80
MAX_FIELDS = 25


def _coerce_text(value: object) -> object:
    """Accept numbers where text is expected; spreadsheets send both."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Inbound requests
# ---------------------------------------------------------------------------


class WebhookRequest(BaseModel):
    """Envelope posted by the automation source.

    Every field is optional here so that absent values surface as a 400 from the
    endpoint rather than as a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    secret: str | None = None
    channel_id: str | None = Field(default=None, alias="channelId")
    type: str | None = None
    data: dict[str, Any] | None = None

    @field_validator("channel_id", mode="before")
    @classmethod
    def coerce_channel_id(cls, value: object) -> object:
        return _coerce_text(value)


class FieldInput(BaseModel):
    """A name/value pair to display on the message."""

    name: str
    value: str
    inline: bool = False

    @field_validator("name", "value", mode="before")
    @classmethod
    def coerce_text(cls, value: object) -> object:
        return _coerce_text(value)


class SurveyOption(BaseModel):
    """A single survey answer."""

    label: Annotated[str, Field(min_length=1)]

    @field_validator("label", mode="before")
    @classmethod
    def coerce_label(cls, value: object) -> object:
        return _coerce_text(value)


class _MessageRequestBase(BaseModel):
    id: Annotated[str, Field(min_length=1, max_length=MAX_SUBJECT_ID_LENGTH)]
    title: str | None = None
    description: str | None = None
    fields: Annotated[list[FieldInput], Field(max_length=MAX_FIELDS)] = Field(default_factory=list)

    @field_validator("id", "title", "description", mode="before")
    @classmethod
    def coerce_text(cls, value: object) -> object:
        return _coerce_text(value)

    @field_validator("id")
    @classmethod
    def reject_separator(cls, value: str) -> str:
        if CONTROL_ID_SEPARATOR in value:
            msg = f"id must not contain {CONTROL_ID_SEPARATOR!r}"
            raise ValueError(msg)
        return value


class ApprovalRequest(_MessageRequestBase):
    """Request for an approve/reject decision."""

    type: Literal["approval"] = "approval"


class NotificationRequest(_MessageRequestBase):
    """Notification that only needs acknowledging."""

    type: Literal["notification"] = "notification"


class SurveyRequest(_MessageRequestBase):
    """Multiple-choice question."""

    type: Literal["survey"] = "survey"
    options: list[SurveyOption] = Field(default_factory=list)


MessageRequest = ApprovalRequest | NotificationRequest | SurveyRequest

REQUEST_MODELS: dict[str, type[MessageRequest]] = {
    "approval": ApprovalRequest,
    "notification": NotificationRequest,
    "survey": SurveyRequest,
}


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class StatusResponse(BaseModel):
    """Liveness payload for ``GET /``."""

    status: str
    uptime: int
    guilds: int


class WebhookResponse(BaseModel):
    """Successful delivery of a webhook message."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message_id: str = Field(alias="messageId")
    channel_name: str = Field(alias="channelName")


class ErrorResponse(BaseModel):
    """Error body returned for every non-200 webhook response."""

    error: str


# ---------------------------------------------------------------------------
# Interactions and callbacks
# ---------------------------------------------------------------------------


class InteractionEvent(BaseModel):
    """A single button click, normalized from the chat platform."""

    model_config = ConfigDict(populate_by_name=True)

    control_id: str = Field(alias="controlId")
    user_id: str = Field(alias="userId")
    user_name: str = Field(alias="userName")
    guild_id: str | None = Field(default=None, alias="guildId")
    channel_id: str | None = Field(default=None, alias="channelId")
    message_id: str | None = Field(default=None, alias="messageId")
    timestamp: datetime


class CallbackPayload(BaseModel):
    """Decision posted back to the automation source."""

    model_config = ConfigDict(populate_by_name=True)

    action: str
    subject_id: str = Field(alias="subjectId")
    user_id: str = Field(alias="userId")
    user_name: str = Field(alias="userName")
    timestamp: str
    guild_id: str | None = Field(default=None, alias="guildId")
    channel_id: str | None = Field(default=None, alias="channelId")
    message_id: str | None = Field(default=None, alias="messageId")
    decision: Literal["approved", "rejected", "confirmed", "survey_response"] | None = None
    option_index: int | None = Field(default=None, alias="optionIndex")

    def to_json(self) -> dict[str, Any]:
        """Return the wire body: camelCase keys, absent values omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
