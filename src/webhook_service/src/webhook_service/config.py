"""Environment-driven settings for the bridge process."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

DEFAULT_WEBHOOK_SECRET = "your-secret-key"  # noqa: S105
DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_CALLBACK_TIMEOUT_SECONDS = 30.0


class Settings(BaseModel):
    """Process configuration.

    Attributes:
        bot_token: Chat platform bot token.
        webhook_secret: Shared secret expected in every webhook body.
        callback_url: Destination for interaction callbacks; None enables simulation mode.
        port: HTTP listen port.
        host: HTTP bind address.
        public_base_url: Externally reachable base URL of the HTTP server, if known.
        callback_timeout_seconds: Transport timeout for the callback POST.

    """

    bot_token: str
    webhook_secret: str = DEFAULT_WEBHOOK_SECRET
    callback_url: str | None = None
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    public_base_url: str | None = None
    callback_timeout_seconds: float = DEFAULT_CALLBACK_TIMEOUT_SECONDS

    @property
    def uses_default_secret(self) -> bool:
        """Return True while the insecure placeholder secret is in use."""
        return self.webhook_secret == DEFAULT_WEBHOOK_SECRET

    @property
    def simulation_mode(self) -> bool:
        """Return True when no callback destination is configured."""
        return not self.callback_url

    @property
    def webhook_url(self) -> str:
        """Return the URL automation sources should post to."""
        base = self.public_base_url or f"http://localhost:{self.port}"
        return f"{base.rstrip('/')}/webhook"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.

    Returns:
        Parsed settings.

    Raises:
        RuntimeError: If BOT_TOKEN is missing or a numeric variable is malformed.

    """
    env = os.environ if environ is None else environ

    bot_token = (env.get("BOT_TOKEN") or "").strip()
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is required.")  # noqa: TRY003, EM101

    return Settings(
        bot_token=bot_token,
        webhook_secret=env.get("WEBHOOK_SECRET") or DEFAULT_WEBHOOK_SECRET,
        callback_url=_optional(env.get("CALLBACK_URL")) or _optional(env.get("GOOGLE_SCRIPT_URL")),
        port=int(_parse_number(env, "PORT", int, DEFAULT_PORT)),
        host=env.get("HOST") or DEFAULT_HOST,
        public_base_url=_optional(env.get("PUBLIC_BASE_URL")),
        callback_timeout_seconds=_parse_number(
            env,
            "CALLBACK_TIMEOUT_SECONDS",
            float,
            DEFAULT_CALLBACK_TIMEOUT_SECONDS,
        ),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _optional(raw: str | None) -> str | None:
    """Treat blank values as unset."""
    if raw is None:
        return None
    return raw.strip() or None


def _parse_number(env: Mapping[str, str], name: str, kind: Callable[[str], float], default: float) -> float:
    """Parse a numeric variable, falling back to ``default`` when unset."""
    raw = _optional(env.get(name))
    if raw is None:
        return default
    try:
        return kind(raw)
    except ValueError as exc:
        label = "an integer" if kind is int else "a number"
        msg = f"{name} must be {label}."
        raise RuntimeError(msg) from exc
