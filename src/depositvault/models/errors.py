"""Error models for depositvault.

Every failure this package raises derives from :class:`VaultError`.
Programming errors (unknown token types, malformed amounts) additionally
derive from ``ValueError``. Remote failures derive from :class:`RemoteError`
and carry the reason string reported by the vault service.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .result import RemoteFailure, RemoteFailureKind


class VaultError(Exception):
    """Base exception for depositvault."""

    code: str = "VAULT_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationMissingError(VaultError):
    """A required configuration value is absent."""

    code = "CONFIGURATION_MISSING"

    def __init__(self, setting: str, message: Optional[str] = None):
        super().__init__(
            message or f"Required setting '{setting}' is not configured",
            details={"setting": setting},
        )
        self.setting = setting


class UnsupportedTokenError(VaultError, ValueError):
    """Token type outside the supported set."""

    code = "UNSUPPORTED_TOKEN"

    def __init__(self, token_type: Any):
        super().__init__(
            f"Unsupported token type: {token_type!r}",
            details={"token_type": str(token_type)},
        )
        self.token_type = token_type


class InvalidAmountError(VaultError, ValueError):
    """Amount that cannot be represented exactly in base units."""

    code = "INVALID_AMOUNT"

    def __init__(self, amount: Any, reason: str):
        super().__init__(
            f"Invalid amount {amount!r}: {reason}",
            details={"amount": str(amount), "reason": reason},
        )
        self.amount = amount
        self.reason = reason


class RemoteError(VaultError):
    """Failure reported by (or while reaching) the remote vault service."""

    code = "REMOTE_ERROR"

    def __init__(
        self,
        reason: str,
        failure_kind: Optional["RemoteFailureKind"] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if failure_kind is not None:
            details["failure_kind"] = failure_kind.value
        super().__init__(reason, details=details)
        self.reason = reason
        self.failure_kind = failure_kind

    @property
    def outcome_unknown(self) -> bool:
        """True when the call timed out and its side effects are unknown."""
        from .result import RemoteFailureKind

        return self.failure_kind is RemoteFailureKind.TIMEOUT

    @classmethod
    def from_failure(
        cls,
        failure: "RemoteFailure",
        details: Optional[dict[str, Any]] = None,
    ) -> "RemoteError":
        """Create an error from a remote failure payload."""
        details = dict(details or {})
        if failure.code:
            details["remote_code"] = failure.code
        return cls(failure.message, failure_kind=failure.kind, details=details)


class RemoteUnavailableError(RemoteError):
    """Transport-level failure; the whole operation may be retried."""

    code = "REMOTE_UNAVAILABLE"


class LedgerUnavailableError(RemoteUnavailableError):
    """The transaction log could not be fetched."""

    code = "LEDGER_UNAVAILABLE"


class RegistrationFailedError(RemoteError):
    """The vault rejected a token registration."""

    code = "REGISTRATION_FAILED"


class ProvisioningFailedError(RemoteError):
    """A subaccount could not be allocated, fetched or rendered."""

    code = "PROVISIONING_FAILED"


class SweepFailedError(RemoteError):
    """The vault rejected a sweep request."""

    code = "SWEEP_FAILED"


class AggregationFailedError(RemoteError):
    """The registry listing that gates a multi-token operation failed."""

    code = "AGGREGATION_FAILED"


class AdminOperationFailedError(RemoteError):
    """An administrative read or write was rejected."""

    code = "ADMIN_OPERATION_FAILED"
