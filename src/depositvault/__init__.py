"""
depositvault

Idempotent onboarding, balance reconciliation and sweep orchestration for
multi-token custodial deposit vaults.
"""

from .client import VaultClient
from .config import VaultSettings, load_settings
from .models.errors import (
    AdminOperationFailedError,
    AggregationFailedError,
    ConfigurationMissingError,
    InvalidAmountError,
    LedgerUnavailableError,
    ProvisioningFailedError,
    RegistrationFailedError,
    RemoteError,
    RemoteUnavailableError,
    SweepFailedError,
    UnsupportedTokenError,
    VaultError,
)
from .models.ledger import Approve, Burn, LedgerEntry, Mint, SweepStatus, Transfer
from .models.result import Err, Ok, RemoteFailure, RemoteFailureKind
from .models.subaccount import (
    DepositAddress,
    DepositResolution,
    ResolutionFailure,
    ResolutionStage,
    SubaccountHandle,
)
from .models.sweep import SweepOutcome, SweepOutcomeStatus, SweepScope
from .models.token import (
    TOKEN_CONFIGS,
    RegisteredToken,
    TokenBalance,
    TokenConfig,
    TokenType,
    from_base_units,
    get_token_config,
    to_base_units,
)
from .service import ApiKeyCredentials, CredentialProvider, VaultService
from .transport import HttpVaultService

__version__ = "0.1.0"

__all__ = [
    # Client
    "VaultClient",
    "VaultSettings",
    "load_settings",
    # Service boundary
    "VaultService",
    "HttpVaultService",
    "CredentialProvider",
    "ApiKeyCredentials",
    "Ok",
    "Err",
    "RemoteFailure",
    "RemoteFailureKind",
    # Errors
    "VaultError",
    "ConfigurationMissingError",
    "UnsupportedTokenError",
    "InvalidAmountError",
    "RemoteError",
    "RemoteUnavailableError",
    "LedgerUnavailableError",
    "RegistrationFailedError",
    "ProvisioningFailedError",
    "SweepFailedError",
    "AggregationFailedError",
    "AdminOperationFailedError",
    # Token models
    "TokenType",
    "TokenConfig",
    "TOKEN_CONFIGS",
    "RegisteredToken",
    "TokenBalance",
    "get_token_config",
    "to_base_units",
    "from_base_units",
    # Ledger models
    "LedgerEntry",
    "Mint",
    "Transfer",
    "Approve",
    "Burn",
    "SweepStatus",
    # Subaccount models
    "SubaccountHandle",
    "DepositAddress",
    "DepositResolution",
    "ResolutionFailure",
    "ResolutionStage",
    # Sweep models
    "SweepOutcome",
    "SweepOutcomeStatus",
    "SweepScope",
]
