"""Integration tests wiring the webhook app, Discord gateway and button handling together."""

from __future__ import annotations

from http import HTTPStatus
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, Mock

import discord
import httpx
import pytest
from discord_gateway_impl import DiscordGateway
from discord_listener import interactions
from discord_listener.interactions import InteractionHandler

from webhook_service import create_app
from webhook_service.config import Settings

if TYPE_CHECKING:
    from collections.abc import Callable

pytestmark = pytest.mark.integration

SECRET = "integration-secret"  # noqa: S105
CHANNEL_ID = 424242
CALLBACK_URL = "https://script.example.com/exec"


class _Recorder:
    """Captures what the bridge sends to Discord and to the callback URL."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.callbacks: list[dict[str, Any]] = []
        self.edits: list[dict[str, Any]] = []


def _discord_client(recorder: _Recorder) -> Mock:
    original = Mock()
    original.edit = AsyncMock(side_effect=lambda **kwargs: recorder.edits.append(kwargs))

    async def send(**kwargs: Any) -> SimpleNamespace:
        recorder.sent.append(kwargs)
        original.embeds = [kwargs["embed"]]
        return SimpleNamespace(id=9001)

    channel = Mock(spec=discord.TextChannel)
    channel.id = CHANNEL_ID
    channel.name = "approvals"
    channel.send = AsyncMock(side_effect=send)
    channel.fetch_message = AsyncMock(return_value=original)

    client = Mock()
    client.guilds = [object()]
    client.get_channel.side_effect = lambda channel_id: channel if channel_id == CHANNEL_ID else None
    client.fetch_channel = AsyncMock(side_effect=discord.NotFound(Mock(status=404, reason="Not Found"), "Unknown Channel"))
    return client


def _click(custom_id: str) -> SimpleNamespace:
    return SimpleNamespace(
        type=discord.InteractionType.component,
        data={"custom_id": custom_id, "component_type": discord.ComponentType.button.value},
        user=SimpleNamespace(id=77, display_name="Grace Hopper", name="grace"),
        guild_id=1,
        channel_id=CHANNEL_ID,
        message=SimpleNamespace(id=9001),
        response=SimpleNamespace(defer=AsyncMock()),
        edit_original_response=AsyncMock(),
    )


async def _inline_to_thread(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    return fn(*args, **kwargs)


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> _Recorder:
    """Record callback POSTs instead of sending them."""
    record = _Recorder()

    def fake_post(url: str, *, json: dict[str, Any], timeout: float) -> SimpleNamespace:
        record.callbacks.append({"url": url, "json": json, "timeout": timeout})
        return SimpleNamespace(ok=True, status_code=HTTPStatus.OK)

    monkeypatch.setattr(interactions.asyncio, "to_thread", _inline_to_thread)
    monkeypatch.setattr("discord_listener.callback.requests.post", fake_post)
    return record


async def _post_webhook(gateway: DiscordGateway, body: dict[str, Any]) -> httpx.Response:
    app = create_app(gateway, Settings(bot_token="token", webhook_secret=SECRET))
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://bridge.test") as client:
        return await client.post("/webhook", json=body)


@pytest.mark.asyncio
@pytest.mark.circleci
async def test_approval_round_trip(recorder: _Recorder) -> None:
    """An approval request becomes buttons, and a click becomes a callback plus a footer."""
    gateway = DiscordGateway(_discord_client(recorder))

    response = await _post_webhook(
        gateway,
        {
            "secret": SECRET,
            "channelId": str(CHANNEL_ID),
            "type": "approval",
            "data": {"id": "REQ-17", "title": "Laptop purchase", "fields": [{"name": "Amount", "value": "1200"}]},
        },
    )

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"success": True, "messageId": "9001", "channelName": "approvals"}
    sent = recorder.sent[0]
    assert sent["embed"].title == "📋 Laptop purchase"
    button_ids = [button.custom_id for button in sent["view"].children]
    assert button_ids == ["approve_REQ-17", "reject_REQ-17"]

    click = _click(button_ids[1])
    await InteractionHandler(gateway, CALLBACK_URL, timeout_seconds=10.0).handle(click)  # type: ignore[arg-type]

    click.edit_original_response.assert_awaited_once_with(content=interactions.REPLY_RECORDED)
    assert len(recorder.callbacks) == 1
    callback = recorder.callbacks[0]
    assert callback["url"] == CALLBACK_URL
    assert callback["timeout"] == 10.0
    body = callback["json"]
    assert {key: body[key] for key in ("action", "subjectId", "decision", "userName", "channelId", "messageId")} == {
        "action": "reject",
        "subjectId": "REQ-17",
        "decision": "rejected",
        "userName": "Grace Hopper",
        "channelId": str(CHANNEL_ID),
        "messageId": "9001",
    }
    assert body["timestamp"].endswith("Z")
    assert recorder.edits[0]["embeds"][0].footer.text.startswith("Last response: Grace Hopper (")


@pytest.mark.asyncio
@pytest.mark.circleci
async def test_survey_click_carries_option_index(recorder: _Recorder) -> None:
    """Survey buttons report which option was picked."""
    gateway = DiscordGateway(_discord_client(recorder))

    response = await _post_webhook(
        gateway,
        {
            "secret": SECRET,
            "channelId": CHANNEL_ID,
            "type": "survey",
            "data": {"id": 5, "options": [{"label": "Red"}, {"label": "Green"}, {"label": "Blue"}]},
        },
    )

    assert response.status_code == HTTPStatus.OK
    button_ids = [button.custom_id for button in recorder.sent[0]["view"].children]
    assert button_ids == ["survey_5_0", "survey_5_1", "survey_5_2"]

    await InteractionHandler(gateway, CALLBACK_URL).handle(_click(button_ids[2]))  # type: ignore[arg-type]

    body = recorder.callbacks[0]["json"]
    assert body["decision"] == "survey_response"
    assert body["optionIndex"] == 2
    assert body["subjectId"] == "5"


@pytest.mark.asyncio
@pytest.mark.circleci
async def test_unknown_channel_is_not_found(recorder: _Recorder) -> None:
    """Channels the bot cannot see produce a 404 and nothing is sent."""
    gateway = DiscordGateway(_discord_client(recorder))

    response = await _post_webhook(
        gateway,
        {"secret": SECRET, "channelId": "111", "type": "notification", "data": {"id": "n1"}},
    )

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json() == {"error": "Channel not found: 111"}
    assert recorder.sent == []
