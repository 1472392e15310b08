"""Administrative reads and writes on a vault instance."""
from __future__ import annotations

import logging
from typing import Optional

from ..models.errors import AdminOperationFailedError, RemoteUnavailableError
from ..models.ledger import LedgerEntry
from ..models.token import TokenType
from .base import BaseResource

logger = logging.getLogger(__name__)


class VaultAdmin(BaseResource):
    """Vault status, indexer cursor, webhook and sweep-interval settings."""

    async def network(self) -> str:
        """Network the vault runs on (``Mainnet`` or ``Local``)."""
        return await self._call("get_network", RemoteUnavailableError, self._service.get_network)

    async def vault_principal(self) -> str:
        """Principal the vault instance runs under."""
        return await self._call(
            "get_vault_principal", RemoteUnavailableError, self._service.get_vault_principal
        )

    async def subaccount_count(self) -> int:
        return await self._call(
            "get_subaccount_count", RemoteUnavailableError, self._service.get_subaccount_count
        )

    async def transactions_count(self) -> int:
        return await self._call(
            "get_transactions_count", RemoteUnavailableError, self._service.get_transactions_count
        )

    async def transaction_token_type(self, tx_hash: str) -> TokenType:
        return await self._call(
            "get_transaction_token_type",
            AdminOperationFailedError,
            self._service.get_transaction_token_type,
            tx_hash,
        )

    async def next_block(self) -> int:
        """Next ledger block the vault's indexer will process."""
        return await self._call("get_next_block", RemoteUnavailableError, self._service.get_next_block)

    async def oldest_block(self) -> Optional[int]:
        """Oldest ledger block the vault has indexed, if any."""
        return await self._call(
            "get_oldest_block", RemoteUnavailableError, self._service.get_oldest_block
        )

    async def webhook_url(self) -> str:
        return await self._call("get_webhook_url", RemoteUnavailableError, self._service.get_webhook_url)

    async def set_webhook_url(self, url: str) -> str:
        if not url:
            raise ValueError("url is required")
        result = await self._call(
            "set_webhook_url", AdminOperationFailedError, self._service.set_webhook_url, url
        )
        logger.info("Webhook URL updated")
        return result

    async def sweep_interval(self) -> int:
        """Seconds between the vault's automatic sweep runs."""
        return await self._call(
            "get_sweep_interval", RemoteUnavailableError, self._service.get_sweep_interval
        )

    async def set_sweep_interval(self, seconds: int) -> int:
        if seconds <= 0:
            raise ValueError(f"seconds must be positive, got {seconds}")
        result = await self._call(
            "set_sweep_interval", AdminOperationFailedError, self._service.set_sweep_interval, seconds
        )
        logger.info("Sweep interval set to %ds", result)
        return result

    async def validate_deposit_address(self, account: str) -> bool:
        """Ask the vault whether ``account`` is a well-formed deposit address."""
        return await self._call(
            "validate_account", AdminOperationFailedError, self._service.validate_account, account
        )

    async def clear_transactions(
        self,
        up_to_index: Optional[int] = None,
        up_to_timestamp_nanos: Optional[int] = None,
    ) -> list[LedgerEntry]:
        """Drop entries from the vault's retained log.

        Returns:
            The entries that remain after clearing
        """
        remaining = await self._call(
            "clear_transactions",
            AdminOperationFailedError,
            self._service.clear_transactions,
            up_to_index,
            up_to_timestamp_nanos,
        )
        logger.info(
            "Cleared transactions (up_to_index=%s, up_to_timestamp_nanos=%s); %d remain",
            up_to_index, up_to_timestamp_nanos, len(remaining),
        )
        return remaining
