"""Discord Gateway Implementation.

Concrete chat_gateway_api.Gateway backed by a discord.py client. Converts the
platform-neutral RenderedMessage into an embed plus a row of buttons and
resolves channels through the client cache before falling back to the API.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from chat_gateway_api import Channel, ControlStyle, Gateway

if TYPE_CHECKING:
    from chat_gateway_api import RenderedMessage

logger = logging.getLogger("discord_gateway_impl")

# Discord rejects empty embed field names and values.
BLANK_FIELD_TEXT = "\u200b"

_BUTTON_STYLES = {
    ControlStyle.PRIMARY: discord.ButtonStyle.primary,
    ControlStyle.SUCCESS: discord.ButtonStyle.success,
    ControlStyle.DANGER: discord.ButtonStyle.danger,
    ControlStyle.SECONDARY: discord.ButtonStyle.secondary,
}


# ---------------------------------------------------------------------------
# Client factory
# ---------------------------------------------------------------------------


def create_client() -> discord.Client:
    """Return a discord.Client with the intents needed for commands and buttons."""
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    return discord.Client(intents=intents)


# ---------------------------------------------------------------------------
# Gateway implementation
# ---------------------------------------------------------------------------


class DiscordChannel(Channel):
    """Channel wrapper around a messageable discord.py channel."""

    def __init__(self, channel: discord.abc.Messageable) -> None:
        """Wrap a resolved discord.py channel."""
        self._channel = channel

    @property
    def id(self) -> str:
        """Get the channel snowflake as a string."""
        return str(getattr(self._channel, "id", ""))

    @property
    def name(self) -> str:
        """Get the channel name, falling back to the id for unnamed channels."""
        return getattr(self._channel, "name", None) or self.id

    async def send(self, message: RenderedMessage) -> str:
        """Send the message as one embed with an optional row of buttons."""
        embed = to_embed(message)
        view = to_view(message)
        if view is None:
            sent = await self._channel.send(embed=embed)
        else:
            sent = await self._channel.send(embed=embed, view=view)
            # Clicks are routed through on_interaction, not the view store.
            view.stop()
        return str(sent.id)

    async def set_footer(self, message_id: str, text: str) -> None:
        """Replace the footer of the first embed on a message in this channel."""
        message = await self._channel.fetch_message(int(message_id))
        if not message.embeds:
            logger.info("Message %s has no embed to annotate", message_id)
            return
        embed = message.embeds[0]
        embed.set_footer(text=text)
        # Omitting ``view`` leaves the existing buttons untouched.
        await message.edit(embeds=[embed, *message.embeds[1:]])


class DiscordGateway(Gateway):
    """Concrete chat_gateway_api.Gateway on top of a discord.py client.

    Attributes:
        _client: The single discord.Client shared by the whole process.

    """

    def __init__(self, client: discord.Client) -> None:
        """Wrap an already constructed discord.Client."""
        self._client = client

    @property
    def client(self) -> discord.Client:
        """Expose the underlying client for event registration and startup."""
        return self._client

    @property
    def guild_count(self) -> int:
        """Return the number of guilds in the client cache."""
        return len(self._client.guilds)

    async def fetch_channel(self, channel_id: str) -> DiscordChannel | None:
        """Resolve a channel from the cache, then from the API."""
        try:
            snowflake = int(channel_id)
        except (TypeError, ValueError):
            return None

        channel = self._client.get_channel(snowflake)
        if channel is None:
            try:
                channel = await self._client.fetch_channel(snowflake)
            except (discord.NotFound, discord.InvalidData):
                return None

        if not isinstance(channel, discord.abc.Messageable):
            logger.info("Channel %s cannot receive messages", channel_id)
            return None
        return DiscordChannel(channel)

    async def set_footer(self, channel_id: str, message_id: str, text: str) -> None:
        """Annotate a message footer; raises LookupError when the channel is gone."""
        channel = await self.fetch_channel(channel_id)
        if channel is None:
            msg = f"Channel not found: {channel_id}"
            raise LookupError(msg)
        await channel.set_footer(message_id, text)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_embed(message: RenderedMessage) -> discord.Embed:
    """Convert a RenderedMessage into a discord.Embed."""
    embed = discord.Embed(
        title=message.title,
        description=message.description,
        color=message.color,
        timestamp=message.timestamp,
    )
    for field in message.fields:
        embed.add_field(name=field.name or BLANK_FIELD_TEXT, value=field.value or BLANK_FIELD_TEXT, inline=field.inline)
    if message.footer:
        embed.set_footer(text=message.footer)
    return embed


def to_view(message: RenderedMessage) -> discord.ui.View | None:
    """Convert the message controls into a persistent view, or None when there are none.

    Must be called with a running event loop.
    """
    if not message.controls:
        return None
    view = discord.ui.View(timeout=None)
    for control in message.controls:
        view.add_item(
            discord.ui.Button(
                label=control.label,
                style=_BUTTON_STYLES[control.style],
                custom_id=control.id,
            )
        )
    return view
