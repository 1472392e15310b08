"""Remote vault service contract.

The orchestration components only talk to the vault through
:class:`VaultService`. Every method returns an :class:`~.models.result.Ok`
or :class:`~.models.result.Err` and never raises for remote conditions,
so components decide how each failure is surfaced.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from .models.ledger import LedgerEntry
from .models.result import Result
from .models.token import TokenType


@runtime_checkable
class CredentialProvider(Protocol):
    """Supplies authentication for calls to the vault."""

    def auth_headers(self) -> dict[str, str]:
        ...


@dataclass(frozen=True)
class ApiKeyCredentials:
    """Static API key credentials."""

    api_key: str
    header: str = "X-API-Key"

    def auth_headers(self) -> dict[str, str]:
        return {self.header: self.api_key}

    def __repr__(self) -> str:
        return f"ApiKeyCredentials(header={self.header!r}, api_key='***')"


class VaultService(Protocol):
    """Coarse RPC surface of one remote vault instance."""

    vault_id: str

    # Tokens
    async def list_registered_tokens(self) -> Result[list[tuple[TokenType, str]]]: ...

    async def register_token(self, token_type: TokenType, ledger_address: str) -> Result[None]: ...

    # Subaccounts
    async def next_allocation_index(self) -> Result[int]: ...

    async def ensure_subaccount(self, token_type: TokenType, allocation_index: int) -> Result[str]: ...

    async def get_subaccount_id(self, token_type: TokenType, allocation_index: int) -> Result[str]: ...

    async def render_deposit_address(self, subaccount_id: str) -> Result[str]: ...

    # Transaction log
    async def fetch_transactions(self, up_to_index: Optional[int] = None) -> Result[list[LedgerEntry]]: ...

    # Sweeps
    async def sweep_all(self) -> Result[list[str]]: ...

    async def sweep_by_token(self, token_type: TokenType) -> Result[list[str]]: ...

    async def sweep_one(self, tx_hash: str) -> Result[list[str]]: ...

    async def sweep_from_subaccount(
        self, subaccount_id: str, amount: int, token_type: TokenType
    ) -> Result[list[str]]: ...

    async def mark_failed(self, tx_hash: str) -> Result[list[str]]: ...

    async def refund(self, transaction_index: int) -> Result[str]: ...

    # Administration
    async def get_network(self) -> Result[str]: ...

    async def get_vault_principal(self) -> Result[str]: ...

    async def get_subaccount_count(self) -> Result[int]: ...

    async def get_transactions_count(self) -> Result[int]: ...

    async def get_transaction_token_type(self, tx_hash: str) -> Result[TokenType]: ...

    async def get_webhook_url(self) -> Result[str]: ...

    async def set_webhook_url(self, url: str) -> Result[str]: ...

    async def get_sweep_interval(self) -> Result[int]: ...

    async def set_sweep_interval(self, seconds: int) -> Result[int]: ...

    async def get_next_block(self) -> Result[int]: ...

    async def get_oldest_block(self) -> Result[Optional[int]]: ...

    async def validate_account(self, account: str) -> Result[bool]: ...

    async def clear_transactions(
        self,
        up_to_index: Optional[int] = None,
        up_to_timestamp_nanos: Optional[int] = None,
    ) -> Result[list[LedgerEntry]]: ...

    async def close(self) -> None: ...
