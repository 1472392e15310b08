"""depositvault models."""
from .base import VaultModel
from .errors import (
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
from .ledger import Approve, Burn, LedgerEntry, Mint, Operation, SweepStatus, Transfer
from .result import Err, Ok, RemoteFailure, RemoteFailureKind, Result
from .subaccount import (
    DepositAddress,
    DepositResolution,
    ResolutionFailure,
    ResolutionStage,
    SubaccountHandle,
)
from .sweep import SweepOutcome, SweepOutcomeStatus, SweepScope
from .token import (
    TOKEN_CONFIGS,
    RegisteredToken,
    TokenBalance,
    TokenConfig,
    TokenType,
    from_base_units,
    get_token_config,
    to_base_units,
)

__all__ = [
    "VaultModel",
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
    # Results
    "Ok",
    "Err",
    "Result",
    "RemoteFailure",
    "RemoteFailureKind",
    # Tokens
    "TokenType",
    "TokenConfig",
    "TOKEN_CONFIGS",
    "RegisteredToken",
    "TokenBalance",
    "get_token_config",
    "to_base_units",
    "from_base_units",
    # Ledger
    "LedgerEntry",
    "Operation",
    "Mint",
    "Transfer",
    "Approve",
    "Burn",
    "SweepStatus",
    # Subaccounts
    "SubaccountHandle",
    "DepositAddress",
    "DepositResolution",
    "ResolutionFailure",
    "ResolutionStage",
    # Sweeps
    "SweepOutcome",
    "SweepOutcomeStatus",
    "SweepScope",
]
