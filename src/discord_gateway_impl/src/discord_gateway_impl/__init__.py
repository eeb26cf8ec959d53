"""Public exports for the Discord gateway implementation package."""

from discord_gateway_impl.discord_impl import (
    DiscordChannel,
    DiscordGateway,
    create_client,
    to_embed,
    to_view,
)

__all__ = ["DiscordChannel", "DiscordGateway", "create_client", "to_embed", "to_view"]
