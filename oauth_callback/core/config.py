"""
Service configuration models and helpers.

Centralizes settings so the listener, the provider client and the bootstrap
share one configuration surface resolved from the environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_CLIENT_ID = (
    "1071006060591-tmhssin2h21lcre235vtolojh4g403ep.apps.googleusercontent.com"
)

DEFAULT_SCOPES: tuple[str, ...] = (
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/cclog",
    "https://www.googleapis.com/auth/experimentsandconfigs",
)


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class GoogleSettings(BaseSettings):
    """Client identity registered with the Google identity platform."""

    model_config = SettingsConfigDict(extra="ignore")

    client_id: str = Field(DEFAULT_CLIENT_ID, validation_alias="GOOGLE_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="GOOGLE_CLIENT_SECRET")


class OAuthSettings(BaseSettings):
    """Callback listener and authorization flow configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    redirect_host: str = Field("localhost", validation_alias="OAUTH_REDIRECT_HOST")
    redirect_port: int = Field(8888, validation_alias="OAUTH_REDIRECT_PORT", ge=0, le=65535)
    http_timeout_seconds: float = Field(
        10.0,
        validation_alias="OAUTH_HTTP_TIMEOUT",
        gt=0,
        description="Upper bound for each call to the token and userinfo endpoints.",
    )
    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        DEFAULT_SCOPES, validation_alias="OAUTH_SCOPES"
    )

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma-separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(scope.strip() for scope in value.split(",") if scope.strip())


class StorageSettings(BaseSettings):
    """Location of the credential database."""

    model_config = SettingsConfigDict(extra="ignore")

    data_dir: Path = Field(Path("~/.oauth-callback"), validation_alias="OAUTH_DATA_DIR")
    db_filename: str = Field("cloud_accounts.db", validation_alias="OAUTH_DB_FILENAME")

    @field_validator("data_dir", mode="after")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename


class AppSettings(BaseSettings):
    """Root settings object for the callback service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "DEFAULT_CLIENT_ID",
    "DEFAULT_SCOPES",
    "GoogleSettings",
    "OAuthSettings",
    "StorageSettings",
    "get_settings",
]
