"""Transaction log models."""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from .base import VaultModel
from .token import TokenType


class SweepStatus(str, Enum):
    """Sweep state of a ledger entry.

    Entries start ``NotSwept``. Sweeps move them to ``Swept`` or
    ``FailedToSweep``; nothing in this package moves them back.
    """

    NOT_SWEPT = "NotSwept"
    SWEPT = "Swept"
    FAILED_TO_SWEEP = "FailedToSweep"


class Mint(VaultModel):
    """Funds minted into a vault subaccount."""

    kind: Literal["Mint"] = "Mint"
    to: str
    amount: int = Field(ge=0)


class Transfer(VaultModel):
    """Funds transferred into a vault subaccount."""

    kind: Literal["Transfer"] = "Transfer"
    from_account: str = Field(alias="from")
    to: str
    amount: int = Field(ge=0)
    fee: int = 0
    spender: Optional[str] = None


class Approve(VaultModel):
    """Allowance approval; moves no funds."""

    kind: Literal["Approve"] = "Approve"
    from_account: str = Field(alias="from")
    spender: str
    allowance: int = 0
    fee: int = 0
    expires_at_nanos: Optional[int] = None


class Burn(VaultModel):
    """Funds burned from an account."""

    kind: Literal["Burn"] = "Burn"
    from_account: str = Field(alias="from")
    amount: int = Field(ge=0)
    spender: Optional[str] = None


Operation = Annotated[
    Union[Mint, Transfer, Approve, Burn],
    Field(discriminator="kind"),
]


def settlement_amount(operation: Optional[Operation]) -> int:
    """Base units a ledger operation contributes to a depositor balance.

    Only mints and transfers settle funds into a subaccount.
    """
    if operation is None:
        return 0
    if isinstance(operation, (Mint, Transfer)):
        return operation.amount
    if isinstance(operation, (Approve, Burn)):
        return 0
    raise TypeError(f"unknown ledger operation: {type(operation).__name__}")


class LedgerEntry(VaultModel):
    """One entry of the vault's append-only transaction log."""

    index: int = Field(ge=0)
    token_type: TokenType
    operation: Optional[Operation] = None
    sweep_status: SweepStatus = SweepStatus.NOT_SWEPT
    created_at_nanos: int = 0
    tx_hash: str
    memo: int = 0
    ledger_address: Optional[str] = None

    @property
    def settlement_amount(self) -> int:
        return settlement_amount(self.operation)

    @property
    def is_outstanding(self) -> bool:
        """Whether the entry still counts toward the depositor balance."""
        return self.sweep_status is SweepStatus.NOT_SWEPT
