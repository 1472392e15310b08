"""Subaccount and deposit address models."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import Field

from .base import VaultModel
from .errors import VaultError
from .token import TokenType


class SubaccountHandle(VaultModel):
    """A provisioned deposit slot for one token type."""

    token_type: TokenType
    allocation_index: int = Field(ge=0)
    subaccount_id: str


class DepositAddress(VaultModel):
    """A ready-to-use external deposit address."""

    token_type: TokenType
    display_name: str
    subaccount_id: str = Field(min_length=1)
    external_address: str = Field(min_length=1)


class ResolutionStage(str, Enum):
    """Step of deposit address resolution."""

    ALLOCATION_INDEX = "allocation_index"
    REGISTRATION = "registration"
    PROVISIONING = "provisioning"
    ADDRESS = "address"


@dataclass
class ResolutionFailure:
    """A token whose deposit address could not be resolved."""

    token_type: TokenType
    stage: ResolutionStage
    error: VaultError

    def to_dict(self) -> dict[str, Any]:
        return {
            "token_type": self.token_type.value,
            "stage": self.stage.value,
            "error": self.error.to_dict(),
        }


@dataclass
class DepositResolution:
    """Outcome of resolving deposit addresses for several tokens.

    Attributes:
        addresses: Addresses for tokens that completed every step
        failures: Tokens that failed, with the step that failed
    """

    addresses: list[DepositAddress] = field(default_factory=list)
    failures: list[ResolutionFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def address_for(self, token_type: TokenType) -> DepositAddress | None:
        for address in self.addresses:
            if address.token_type is token_type:
                return address
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "addresses": [a.to_dict() for a in self.addresses],
            "failures": [f.to_dict() for f in self.failures],
        }
