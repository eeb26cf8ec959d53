"""Abstract interfaces for chat platform gateways."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chat_gateway_api.models import RenderedMessage

__all__ = ["Channel", "Gateway"]


class Channel(ABC):
    """A destination that rendered messages can be sent to."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Return the platform channel identifier."""
        raise NotImplementedError

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the channel display name."""
        raise NotImplementedError

    @abstractmethod
    async def send(self, message: RenderedMessage) -> str:
        """Send a rendered message to the channel.

        Args:
            message: Message produced by the renderer.

        Returns:
            Platform-assigned identifier of the new message.

        """
        raise NotImplementedError


class Gateway(ABC):
    """The contract for the long-lived connection to a chat platform.

    One instance is constructed at process start and handed to every
    consumer that needs to talk to the platform.
    """

    @property
    @abstractmethod
    def guild_count(self) -> int:
        """Return the number of servers the bot is currently connected to."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_channel(self, channel_id: str) -> Channel | None:
        """Resolve a channel by identifier.

        Args:
            channel_id: Platform channel identifier.

        Returns:
            The channel, or None when it does not exist or cannot receive messages.

        """
        raise NotImplementedError

    @abstractmethod
    async def set_footer(self, channel_id: str, message_id: str, text: str) -> None:
        """Replace the footer of a previously sent message, keeping its controls.

        Args:
            channel_id: Channel holding the message.
            message_id: Identifier returned by ``Channel.send``.
            text: New footer text.

        """
        raise NotImplementedError
