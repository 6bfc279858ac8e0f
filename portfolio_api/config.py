"""
Configuration and settings for the portfolio backend.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Optional

from pydantic import Field, PrivateAttr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_SERVICE_ACCOUNT_KEYS = ("type", "project_id", "private_key", "client_email")


def parse_service_account_key(raw: str) -> dict:
    """Decode and check the service account JSON handed in by the environment."""
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"SERVICE_ACCOUNT_KEY is not valid JSON: {exc.msg}") from exc
    if not isinstance(info, dict):
        raise ValueError("SERVICE_ACCOUNT_KEY must be a JSON object")
    missing = [key for key in REQUIRED_SERVICE_ACCOUNT_KEYS if not info.get(key)]
    if missing:
        raise ValueError(
            f"SERVICE_ACCOUNT_KEY is missing required keys: {', '.join(missing)}"
        )
    if info["type"] != "service_account":
        raise ValueError("SERVICE_ACCOUNT_KEY must describe a service_account")
    return info


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    log_level: str = Field(default="INFO")

    # Only one frontend origin is allowed to call the API.
    cors_origin: str = Field(default="https://enesocakci.com")

    # Firebase service account as a raw JSON string.
    service_account_key: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="PORTFOLIO_USE_IN_MEMORY_BACKENDS"
    )

    _service_account_info: Optional[dict] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _load_service_account(self) -> "Settings":
        if self.service_account_key:
            self._service_account_info = parse_service_account_key(
                self.service_account_key
            )
        return self

    @property
    def service_account_info(self) -> Optional[dict]:
        return self._service_account_info

    @property
    def cors_methods(self) -> list[str]:
        return ["GET", "POST", "PUT", "DELETE"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
