"""
depositvault client

Client-side orchestration for a remote custodial vault that tracks
multi-token deposits into per-depositor subaccounts.

Example usage:
    ```python
    from depositvault import TokenType, VaultClient

    async with VaultClient.from_settings() as client:
        # Onboard tokens and hand out deposit addresses
        resolution = await client.deposits.resolve_all([TokenType.ICP, TokenType.CKUSDC])

        # Outstanding deposits per token
        balances = await client.balances.compute_balances()

        # Move ICP deposits into the vault's main balance
        outcome = await client.sweeps.sweep_by_token(TokenType.ICP)
    ```
"""
from __future__ import annotations

from typing import Optional

from .config import VaultSettings, load_settings
from .resources.admin import VaultAdmin
from .resources.balances import BalanceReconciler
from .resources.deposits import DepositAddressResolver
from .resources.ledger import TransactionLedgerView
from .resources.registry import TokenRegistry
from .resources.subaccounts import SubaccountProvisioner
from .resources.sweeps import SweepOrchestrator
from .service import CredentialProvider, VaultService
from .transport import HttpVaultService


class VaultClient:
    """
    Vault orchestration client.

    Provides access to all orchestration components over one shared
    vault service handle:
    - tokens: Idempotent token registration
    - subaccounts: Deposit subaccount provisioning
    - deposits: Deposit address resolution across tokens
    - ledger: Transaction log queries
    - balances: Outstanding balances reconciled from the log
    - sweeps: Sweep orchestration and outcome classification
    - admin: Vault status and administrative settings

    Args:
        service: Remote vault service handle
        settings: Client settings (token ledger overrides, duplicate
            tolerance); defaults to the process-wide settings
    """

    def __init__(
        self,
        service: VaultService,
        settings: Optional[VaultSettings] = None,
    ):
        self.service = service
        self.settings = settings or load_settings()

        # Initialize components
        self.tokens = TokenRegistry(self)
        self.subaccounts = SubaccountProvisioner(self)
        self.deposits = DepositAddressResolver(self)
        self.ledger = TransactionLedgerView(self)
        self.balances = BalanceReconciler(self)
        self.sweeps = SweepOrchestrator(self)
        self.admin = VaultAdmin(self)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[VaultSettings] = None,
        credentials: Optional[CredentialProvider] = None,
    ) -> "VaultClient":
        """Build a client backed by the HTTP vault service."""
        settings = settings or load_settings()
        return cls(HttpVaultService.from_settings(settings, credentials), settings)

    @property
    def vault_id(self) -> str:
        return self.service.vault_id

    async def close(self) -> None:
        """Close the underlying service handle."""
        await self.service.close()

    async def __aenter__(self) -> "VaultClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
