"""Environment-based configuration for the relay server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_TRELLO_API_URL = "https://api.trello.com/1"
DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 5000


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class Settings:
    """Relay server settings.

    Attributes:
        trello_api_key: Trello API key sent with every upstream request.
        trello_api_token: Trello API token sent with every upstream request.
        trello_api_url: Base URL of the Trello REST API.
        webhook_url: Public URL Trello should call back (the relay's /webhook).
        host: Interface to bind.
        port: Port to listen on.
    """

    trello_api_key: str = ""
    trello_api_token: str = ""
    trello_api_url: str = DEFAULT_TRELLO_API_URL
    webhook_url: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, dotenv: bool = True
    ) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.
            dotenv: Whether to load a .env file into os.environ first.

        Raises:
            ConfigError: If PORT is not an integer.
        """
        if dotenv:
            load_dotenv()
        env = os.environ if environ is None else environ

        raw_port = env.get("PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError as e:
            raise ConfigError(f"PORT must be an integer, got {raw_port!r}") from e

        return cls(
            trello_api_key=env.get("TRELLO_API_KEY", ""),
            trello_api_token=env.get("TRELLO_API_TOKEN", ""),
            trello_api_url=env.get("TRELLO_API_URL", DEFAULT_TRELLO_API_URL).rstrip("/"),
            webhook_url=env.get("WEBHOOK_URL") or None,
            host=env.get("HOST", DEFAULT_HOST),
            port=port,
        )

    @property
    def has_trello_credentials(self) -> bool:
        return bool(self.trello_api_key and self.trello_api_token)

    def require_webhook_url(self) -> str:
        """Return the webhook URL or raise ConfigError if it is not set."""
        if not self.webhook_url:
            raise ConfigError("WEBHOOK_URL not configured")
        return self.webhook_url
