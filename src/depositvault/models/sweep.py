"""Sweep outcome models."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .errors import RemoteError
from .token import TokenType


class SweepScope(str, Enum):
    """Granularity of a sweep request."""

    VAULT = "vault"
    TOKEN = "token"
    TRANSACTION = "transaction"
    SUBACCOUNT = "subaccount"
    MARK_FAILED = "mark_failed"
    REFUND = "refund"


class SweepOutcomeStatus(str, Enum):
    """Classification of a sweep request's result."""

    SWEPT = "swept"
    NOTHING_TO_SWEEP = "nothing_to_sweep"
    MARKED_FAILED = "marked_failed"
    REFUNDED = "refunded"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SweepOutcome:
    """Classified result of one sweep request.

    Attributes:
        scope: Granularity of the request
        status: Classification of the result
        receipts: Receipt identifiers (or the refund confirmation) reported
            by the vault
        target: Transaction hash, transaction index or subaccount id for
            targeted requests
        token_type: Token the request was scoped to, if any
        reason: Remote reason string for failed or unknown outcomes
    """

    scope: SweepScope
    status: SweepOutcomeStatus
    receipts: tuple[str, ...] = ()
    target: Optional[str] = None
    token_type: Optional[TokenType] = None
    reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status in (
            SweepOutcomeStatus.SWEPT,
            SweepOutcomeStatus.NOTHING_TO_SWEEP,
            SweepOutcomeStatus.MARKED_FAILED,
            SweepOutcomeStatus.REFUNDED,
        )

    @classmethod
    def from_receipts(
        cls,
        scope: SweepScope,
        receipts: list[str],
        target: Optional[str] = None,
        token_type: Optional[TokenType] = None,
    ) -> "SweepOutcome":
        if scope is SweepScope.MARK_FAILED:
            status = SweepOutcomeStatus.MARKED_FAILED
        elif scope is SweepScope.REFUND:
            status = SweepOutcomeStatus.REFUNDED
        elif receipts:
            status = SweepOutcomeStatus.SWEPT
        else:
            status = SweepOutcomeStatus.NOTHING_TO_SWEEP
        return cls(
            scope=scope,
            status=status,
            receipts=tuple(receipts),
            target=target,
            token_type=token_type,
        )

    @classmethod
    def from_error(
        cls,
        scope: SweepScope,
        error: RemoteError,
        target: Optional[str] = None,
        token_type: Optional[TokenType] = None,
    ) -> "SweepOutcome":
        status = SweepOutcomeStatus.UNKNOWN if error.outcome_unknown else SweepOutcomeStatus.FAILED
        return cls(
            scope=scope,
            status=status,
            target=target,
            token_type=token_type,
            reason=error.reason,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "scope": self.scope.value,
            "status": self.status.value,
            "receipts": list(self.receipts),
        }
        if self.target is not None:
            result["target"] = self.target
        if self.token_type is not None:
            result["token_type"] = self.token_type.value
        if self.reason is not None:
            result["reason"] = self.reason
        return result
