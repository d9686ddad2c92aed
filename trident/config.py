import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trident.services.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Client configuration loaded from environment variables and an optional JSON file."""

    orchestrator_url: str = Field(
        default=""
    )
    providers: Dict[str, Any] = Field(
        default_factory=dict
    )
    auth_token: str | None = Field(
        default=None
    )
    request_timeout: float | None = Field(
        default=None
    )
    log_level: str = Field(
        default="INFO"
    )

    model_config = SettingsConfigDict(env_prefix="TRIDENT_", case_sensitive=False, extra="ignore")

    @field_validator("orchestrator_url", mode="after")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level", mode="after")
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment variables win over values read from the config file.
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """Read a JSON config file, mapping ``orchestrator-url`` style keys to field names."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"unable to read config file {path}", cause=exc) from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"config file {path} must contain a JSON object")
    return {str(key).replace("-", "_"): value for key, value in raw.items()}


@lru_cache(maxsize=1)
def get_settings(config_file: str | None = None) -> Settings:
    """Return cached client settings."""

    try:
        if config_file:
            return Settings(**load_config_file(config_file))
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError("invalid configuration", cause=exc) from exc
