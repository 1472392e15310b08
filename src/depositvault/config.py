"""Configuration surface for depositvault clients."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.token import TokenType, get_token_config


class VaultSettings(BaseSettings):
    """Settings for one vault instance.

    Every field can be set from the environment with the ``VAULT_`` prefix,
    e.g. ``VAULT_VAULT_ID`` or ``VAULT_TOKEN_LEDGERS='{"ICP": "..."}'``.
    """

    model_config = SettingsConfigDict(
        env_prefix="VAULT_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    # Environment
    environment: Literal["local", "staging", "mainnet"] = "local"

    # Remote vault service
    vault_id: str = ""
    base_url: str = "http://127.0.0.1:4943"
    api_key: str = ""
    timeout: float = 30.0

    # Read-only calls only; mutations are never retried
    read_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=0.5, ge=0)

    # Per-token settlement ledger overrides
    token_ledgers: dict[TokenType, str] = Field(default_factory=dict)

    # Treat "already exists" rejections from registration and provisioning
    # as success
    tolerate_duplicate_errors: bool = True

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("token_ledgers")
    @classmethod
    def drop_empty_overrides(cls, v: dict[TokenType, str]) -> dict[TokenType, str]:
        return {token: address for token, address in v.items() if address}

    def ledger_address_for(self, token_type: TokenType) -> str:
        """Settlement ledger address for a token, honoring overrides."""
        config = get_token_config(token_type)
        return self.token_ledgers.get(config.token_type) or config.ledger_address


@lru_cache
def load_settings(env_file: str | None = None) -> VaultSettings:
    """Load VaultSettings once per process."""
    env_path = Path(env_file) if env_file else None
    return VaultSettings(_env_file=env_path)
