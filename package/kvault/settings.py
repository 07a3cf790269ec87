"""Client configuration loaded from the environment and ``.env`` files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .engine import EngineVersion
from .errors import SettingsError

__all__ = ["VaultSettings", "load_settings", "TOKEN_FILE"]

TOKEN_FILE = Path.home() / ".vault-token"


class VaultSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ADDR: Optional[str] = Field(
        default=None,
        description="Base URL of the Vault server.",
        examples=["http://localhost:8200", "https://vault.example.com"],
    )

    TOKEN: Optional[str] = Field(
        default=None,
        description="Token sent in the X-Vault-Token header. Read from ~/.vault-token when unset.",
        examples=["hvs.CAESIJ...", "s.xxxxxx"],
    )

    NAMESPACE: Optional[str] = Field(
        default=None,
        description="Namespace sent in the X-Vault-Namespace header.",
        examples=["admin", "admin/team-a"],
    )

    OPEN_TIMEOUT: Optional[float] = Field(
        default=10.0,
        description="Seconds to wait for the connection to open.",
    )

    READ_TIMEOUT: Optional[float] = Field(
        default=30.0,
        description="Seconds to wait for response data.",
    )

    SSL_VERIFY: bool = Field(
        default=True,
        description="Whether the server certificate is verified.",
    )

    SSL_CERT: Optional[str] = Field(
        default=None,
        description="PEM file with the CA bundle used to verify the server.",
    )

    MAX_RETRIES: int = Field(
        default=0,
        ge=0,
        description="Retries after a failed attempt, on top of the first attempt.",
        examples=[0, 3],
    )

    RETRY_INTERVAL_MS: int = Field(
        default=1000,
        ge=0,
        description="Fixed pause between two attempts, in milliseconds.",
    )

    PREFIX_PATH_DEPTH: int = Field(
        default=1,
        ge=1,
        description="Number of leading path segments that make up a mount prefix.",
        examples=[1, 2],
    )

    ENGINE_VERSION: Optional[EngineVersion] = Field(
        default=None,
        description="Engine version assumed for mounts missing from the mount listing.",
        examples=["1", "2"],
    )

    USE_ENGINE_PATH_MAP: bool = Field(
        default=True,
        description="Query /v1/sys/mounts on startup to learn each mount's engine version.",
    )

    LOG_LEVEL: str = Field(default="INFO", description="loguru level for setup_logging.")

    LOG_RESOURCE: str = Field(default="", description="Prefix added to every log line.")

    @field_validator("ENGINE_VERSION", mode="before")
    @classmethod
    def _parse_engine_version(cls, value):
        if value is None or value == "":
            return None
        version = EngineVersion.parse(value)
        if version is EngineVersion.UNKNOWN:
            raise ValueError(f"Engine version must be 1 or 2, got {value!r}")
        return version

    @model_validator(mode="after")
    def _token_from_file(self) -> "VaultSettings":
        if self.TOKEN is None and TOKEN_FILE.is_file():
            token = TOKEN_FILE.read_text(encoding="utf-8").strip()
            if token:
                object.__setattr__(self, "TOKEN", token)
        if self.ADDR:
            object.__setattr__(self, "ADDR", self.ADDR.rstrip("/"))
        return self

    def require_credentials(self) -> None:
        if not self.ADDR:
            raise SettingsError("No Vault address is set (VAULT_ADDR)")
        if not self.TOKEN:
            raise SettingsError("No Vault token is set (VAULT_TOKEN or ~/.vault-token)")


def load_settings(**overrides) -> VaultSettings:
    """Load ``.env`` into the environment and build validated settings."""

    load_dotenv()
    try:
        settings = VaultSettings(**overrides)
    except ValidationError as exc:
        logger.error(
            "Configuration error: {}\n"
            "Please ensure that all required environment variables are set correctly.",
            exc,
        )
        raise SettingsError(str(exc)) from exc
    settings.require_credentials()
    return settings
