"""Platform-neutral schemas for messages rendered into a chat channel."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from enum import Enum

from pydantic import BaseModel, Field

__all__ = ["Control", "ControlStyle", "MessageField", "RenderedMessage"]


class ControlStyle(str, Enum):
    """Visual style of an interactive control."""

    PRIMARY = "primary"
    SUCCESS = "success"
    DANGER = "danger"
    SECONDARY = "secondary"


class Control(BaseModel):
    """A clickable control; ``id`` is echoed back verbatim by the platform on activation."""

    id: str
    label: str
    style: ControlStyle


class MessageField(BaseModel):
    """A name/value pair shown in the message body."""

    name: str
    value: str
    inline: bool = False


class RenderedMessage(BaseModel):
    """Message ready to be handed to a Gateway.

    Attributes:
        title: Heading line.
        description: Body text below the heading.
        color: RGB accent color as an integer (e.g. ``0x3498DB``).
        timestamp: Time shown alongside the message.
        fields: Ordered name/value pairs.
        controls: Ordered controls, rendered on a single row.
        footer: Optional footer text.

    """

    title: str
    description: str
    color: int
    timestamp: datetime
    fields: list[MessageField] = Field(default_factory=list)
    controls: list[Control] = Field(default_factory=list)
    footer: str | None = None
