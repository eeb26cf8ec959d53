"""Button interaction handling.

Each click is acknowledged with a private placeholder right away, then the
decision is forwarded to the callback destination and the placeholder is
replaced with the outcome. Finally the original message footer records who
answered last. Nothing is shared between clicks.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import discord

from discord_listener.callback import CallbackUnconfirmedError, send_callback
from webhook_service.controls import DECISIONS, SURVEY, decode_control_id
from webhook_service.models import CallbackPayload, InteractionEvent

if TYPE_CHECKING:
    from chat_gateway_api import Gateway

logger = logging.getLogger("discord_listener.interactions")

REPLY_RECORDED = "✅ Your response has been recorded!"
REPLY_SIMULATED = "✅ Your response has been recorded! (simulation mode)"
REPLY_UNCONFIRMED = "⚠️ Your response was received, but it could not be confirmed by the workflow."
REPLY_UNCONFIRMED_NETWORK = "⚠️ Your response was received, but a network problem prevented confirming it."
REPLY_FAILED = "❌ Something went wrong while handling your response."

FOOTER_TEMPLATE = "Last response: {user_name} ({when})"
FOOTER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class InteractionHandler:
    """Turns button clicks into callbacks.

    Attributes:
        _gateway: Gateway used to annotate the clicked message.
        _callback_url: Destination for decisions; None runs in simulation mode.
        _timeout_seconds: Transport timeout for the callback POST.

    """

    def __init__(
        self,
        gateway: Gateway,
        callback_url: str | None,
        *,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Bind the handler to a gateway and callback destination."""
        self._gateway = gateway
        self._callback_url = callback_url
        self._timeout_seconds = timeout_seconds

    @property
    def simulation_mode(self) -> bool:
        """Return True when decisions are only logged."""
        return not self._callback_url

    async def handle(self, interaction: discord.Interaction) -> None:
        """Handle one interaction; anything other than a button click is ignored."""
        if not is_button_click(interaction):
            return

        try:
            await interaction.response.defer(ephemeral=True, thinking=True)
            event = build_interaction_event(interaction)
            payload = build_callback_payload(event)
            reply = await self._deliver(payload)
            await interaction.edit_original_response(content=reply)
        except Exception:
            logger.exception("Failed to handle button interaction")
            try:
                await interaction.edit_original_response(content=REPLY_FAILED)
            except Exception:
                logger.exception("Failed to send the failure reply")
            return

        await self._annotate(event)

    async def _deliver(self, payload: CallbackPayload) -> str:
        """Forward the payload and return the reply to show the user."""
        if not self._callback_url:
            logger.info("Simulation mode, callback payload: %s", payload.to_json())
            return REPLY_SIMULATED

        try:
            await asyncio.to_thread(
                send_callback,
                self._callback_url,
                payload,
                timeout_seconds=self._timeout_seconds,
            )
        except CallbackUnconfirmedError as exc:
            logger.error("Callback for %s_%s not confirmed: %s", payload.action, payload.subject_id, exc)  # noqa: TRY400
            if exc.status_code is None:
                return REPLY_UNCONFIRMED_NETWORK
            return REPLY_UNCONFIRMED

        logger.info("Recorded %s for %s from %s", payload.decision or payload.action, payload.subject_id, payload.user_name)
        return REPLY_RECORDED

    async def _annotate(self, event: InteractionEvent) -> None:
        """Record the last responder on the original message; failures are only logged."""
        if not event.channel_id or not event.message_id:
            return
        footer = FOOTER_TEMPLATE.format(
            user_name=event.user_name,
            when=datetime.now().astimezone().strftime(FOOTER_TIME_FORMAT),
        )
        try:
            await self._gateway.set_footer(event.channel_id, event.message_id, footer)
        except Exception:
            logger.exception("Failed to update message %s", event.message_id)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_button_click(interaction: discord.Interaction) -> bool:
    """Return True for component interactions coming from a button."""
    if interaction.type is not discord.InteractionType.component:
        return False
    data: dict[str, Any] = dict(interaction.data or {})
    return data.get("component_type") == discord.ComponentType.button.value


def build_interaction_event(interaction: discord.Interaction, *, now: datetime | None = None) -> InteractionEvent:
    """Normalize a discord.py interaction into an InteractionEvent."""
    data: dict[str, Any] = dict(interaction.data or {})
    user = interaction.user
    message = interaction.message
    return InteractionEvent(
        control_id=str(data.get("custom_id", "")),
        user_id=str(user.id),
        user_name=user.display_name or user.name,
        guild_id=_snowflake(interaction.guild_id),
        channel_id=_snowflake(interaction.channel_id),
        message_id=_snowflake(message.id if message is not None else None),
        timestamp=now or datetime.now(UTC),
    )


def build_callback_payload(event: InteractionEvent) -> CallbackPayload:
    """Decode the control id and map it to a decision."""
    ref = decode_control_id(event.control_id)
    return CallbackPayload(
        action=ref.action,
        subject_id=ref.subject_id,
        user_id=event.user_id,
        user_name=event.user_name,
        timestamp=format_timestamp(event.timestamp),
        guild_id=event.guild_id,
        channel_id=event.channel_id,
        message_id=event.message_id,
        decision=DECISIONS.get(ref.action),
        option_index=ref.option_index if ref.action == SURVEY else None,
    )


def format_timestamp(value: datetime) -> str:
    """Format as UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _snowflake(value: int | None) -> str | None:
    return None if value is None else str(value)
