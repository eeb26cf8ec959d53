"""Discord gateway listener and process entry point for the workflow bridge.

Runs the Discord connection and the webhook HTTP server on one event loop,
sharing a single gateway between the webhook endpoint and button handling.
"""

from __future__ import annotations

import asyncio
import logging
import sys

import discord
import uvicorn
from discord_gateway_impl import DiscordGateway, create_client
from dotenv import load_dotenv

from discord_listener.interactions import InteractionHandler
from webhook_service import create_app, load_settings
from webhook_service.config import Settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("discord_listener")

PING_COMMAND = "!ping"
PING_REPLY = "Pong!"
TEST_WEBHOOK_COMMAND = "!test-webhook"


# ---------------------------------------------------------------------------
# Text commands
# ---------------------------------------------------------------------------


async def handle_message(message: discord.Message, settings: Settings) -> None:
    """Answer the ``!ping`` and ``!test-webhook`` text commands.

    Args:
        message: Incoming Discord message event payload.
        settings: Process settings used to build the webhook URL.

    Returns:
        None.

    """
    if message.author.bot:
        return

    content = (message.content or "").strip()
    if content == PING_COMMAND:
        await message.channel.send(PING_REPLY)
    elif content == TEST_WEBHOOK_COMMAND:
        await message.channel.send(f"Test webhook URL: {settings.webhook_url}\nChannel ID: {message.channel.id}")


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def register_events(client: discord.Client, handler: InteractionHandler, settings: Settings) -> None:
    """Attach event callbacks to the client."""

    @client.event
    async def on_ready() -> None:
        """Log the bot identity once connected."""
        logger.info("Logged in as %s", client.user)
        logger.info("Connected to %d guild(s)", len(client.guilds))

    @client.event
    async def on_message(message: discord.Message) -> None:
        await handle_message(message, settings)

    @client.event
    async def on_interaction(interaction: discord.Interaction) -> None:
        await handler.handle(interaction)


async def serve(settings: Settings, client: discord.Client | None = None) -> None:
    """Log in, then run the gateway and the HTTP server until either stops.

    When one side finishes the other is asked to stop and awaited, so the
    HTTP server always runs its shutdown.

    Raises:
        discord.LoginFailure: If the bot token is rejected.

    """
    client = client or create_client()
    gateway = DiscordGateway(client)
    handler = InteractionHandler(
        gateway,
        settings.callback_url,
        timeout_seconds=settings.callback_timeout_seconds,
    )
    register_events(client, handler, settings)
    app = create_app(gateway, settings)
    server = uvicorn.Server(uvicorn.Config(app, host=settings.host, port=settings.port, log_level="info"))

    async with client:
        await client.login(settings.bot_token)
        logger.info("Webhook server listening on %s:%s, endpoint /webhook", settings.host, settings.port)
        gateway_task = asyncio.create_task(client.connect(), name="discord-gateway")
        server_task = asyncio.create_task(server.serve(), name="webhook-server")
        await asyncio.wait({gateway_task, server_task}, return_when=asyncio.FIRST_COMPLETED)

        server.should_exit = True
        await client.close()
        results = await asyncio.gather(gateway_task, server_task, return_exceptions=True)
        logger.info("Bridge stopped")
        for result in results:
            if isinstance(result, BaseException):
                raise result


def main() -> None:
    """Run the bridge; exit with status 1 on missing configuration or failed login."""
    load_dotenv()
    try:
        settings = load_settings()
    except RuntimeError as exc:
        logger.error("%s", exc)  # noqa: TRY400
        sys.exit(1)

    logger.info("Bot token configured (%d characters)", len(settings.bot_token))
    if settings.uses_default_secret:
        logger.warning("WEBHOOK_SECRET is not set; using the insecure default secret.")
    if settings.simulation_mode:
        logger.warning("No callback URL configured; button clicks run in simulation mode.")

    try:
        asyncio.run(serve(settings))
    except discord.LoginFailure as exc:
        logger.error("Bot login failed: %s", exc)  # noqa: TRY400
        sys.exit(1)


if __name__ == "__main__":
    main()
