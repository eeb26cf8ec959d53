"""Public export surface for ``chat_gateway_api``."""

from chat_gateway_api.client import Channel, Gateway
from chat_gateway_api.models import Control, ControlStyle, MessageField, RenderedMessage

__all__ = [
    "Channel",
    "Control",
    "ControlStyle",
    "Gateway",
    "MessageField",
    "RenderedMessage",
]
