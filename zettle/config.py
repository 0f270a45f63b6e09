"""Zettle SDK configuration."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Environment-driven settings for the Zettle inventory client and webhooks."""

    inventory_url: str = "https://inventory.izettle.com"
    api_key: str = ""
    # Sent as the "identifier" of every stock movement batch
    integration_uuid: str = ""

    timeout: float = 30.0
    max_retries: int = 3
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0

    # Signing key returned by Zettle when the webhook subscription is created
    webhook_signing_key: str = ""
    redis_url: str = "redis://localhost:6379/0"

    model_config = {"env_prefix": "ZETTLE_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
