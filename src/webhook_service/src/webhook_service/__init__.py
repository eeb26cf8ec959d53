"""Webhook endpoint and message rendering for the workflow bridge."""

from webhook_service.config import Settings, load_settings
from webhook_service.main import create_app, handle_webhook
from webhook_service.renderer import render

__all__ = ["Settings", "create_app", "handle_webhook", "load_settings", "render"]
