"""
Orchestration components for the depositvault client.
"""
from .admin import VaultAdmin
from .balances import BalanceReconciler
from .base import BaseResource
from .deposits import DepositAddressResolver
from .ledger import TransactionLedgerView
from .registry import TokenRegistry
from .subaccounts import SubaccountProvisioner
from .sweeps import SweepOrchestrator

__all__ = [
    "BaseResource",
    "TokenRegistry",
    "SubaccountProvisioner",
    "DepositAddressResolver",
    "TransactionLedgerView",
    "BalanceReconciler",
    "SweepOrchestrator",
    "VaultAdmin",
]
