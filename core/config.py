"""Configuration models and loading."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ConfigurationError

ENV_VARS = (
    "TELEGRAM_TOKEN",
    "N8N_WEBHOOK",
    "TELEGRAM_API_BASE",
    "HOST",
    "PORT",
    "GATEWAY_DEBUG",
    "PROXY_TIMEOUT",
)


class _Settings(BaseModel):
    model_config = ConfigDict(frozen=True)


class ServerSettings(_Settings):
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    debug: bool = False


class TelegramSettings(_Settings):
    token: str
    api_base: str = "https://api.telegram.org"

    @property
    def api_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/bot{self.token}"

    @property
    def file_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/file/bot{self.token}"


class WebhookSettings(_Settings):
    url: str


class UpstreamSettings(_Settings):
    timeout: float = Field(default=30.0, gt=0)
    max_connections: int = 100
    max_keepalive_connections: int = 20


class Config(_Settings):
    server: ServerSettings = Field(default_factory=ServerSettings)
    telegram: TelegramSettings
    webhook: WebhookSettings
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build the configuration from environment variables.

    Raises:
        ConfigurationError: a required variable is missing or a value is malformed.
    """
    env = os.environ if environ is None else environ

    token = env.get("TELEGRAM_TOKEN", "").strip()
    webhook = env.get("N8N_WEBHOOK", "").strip()
    if not token or not webhook:
        raise ConfigurationError("Missing TELEGRAM_TOKEN or N8N_WEBHOOK")

    data: dict = {
        "telegram": {"token": token},
        "webhook": {"url": webhook},
        "server": {},
        "upstream": {},
    }
    if env.get("TELEGRAM_API_BASE"):
        data["telegram"]["api_base"] = env["TELEGRAM_API_BASE"]
    if env.get("HOST"):
        data["server"]["host"] = env["HOST"]
    if env.get("PORT"):
        data["server"]["port"] = env["PORT"]
    if env.get("GATEWAY_DEBUG"):
        data["server"]["debug"] = env["GATEWAY_DEBUG"]
    if env.get("PROXY_TIMEOUT"):
        data["upstream"]["timeout"] = env["PROXY_TIMEOUT"]

    try:
        return Config.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
