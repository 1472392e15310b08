"""Token metadata and base-unit amount conversion."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, DecimalException, Inexact, InvalidOperation, localcontext
from enum import Enum
from typing import Union

from pydantic import Field

from .base import VaultModel
from .errors import InvalidAmountError, UnsupportedTokenError

AmountLike = Union[Decimal, int, str, float]


class TokenType(str, Enum):
    """Token types a vault can hold.

    The ``CK*`` members are the chain-key wrapped assets (wrapped USDC,
    wrapped USDT and wrapped BTC). Values are the remote wire tags.
    """

    ICP = "ICP"
    CKUSDC = "CKUSDC"
    CKUSDT = "CKUSDT"
    CKBTC = "CKBTC"


def _scale(value: Decimal, exponent: int) -> Decimal:
    # Scaling must be exact; exponent overflow or underflow raises.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + abs(exponent) + 2)
        ctx.traps[Inexact] = True
        return value.scaleb(exponent)


def _as_decimal(amount: AmountLike) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidAmountError(amount, "booleans are not amounts")
    if isinstance(amount, float):
        # Shortest repr round-trips, so 0.1 becomes Decimal("0.1").
        amount = repr(amount)
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidAmountError(amount, "not a number") from exc
    if not value.is_finite():
        raise InvalidAmountError(amount, "must be finite")
    return value


def to_base_units(amount: AmountLike, decimals: int) -> int:
    """Convert a display-unit amount to integer base units.

    Raises:
        InvalidAmountError: If the amount is negative, not finite, out of
            range, or has more fractional digits than ``decimals``.
    """
    value = _as_decimal(amount)
    if value < 0:
        raise InvalidAmountError(amount, "must not be negative")
    try:
        scaled = _scale(value, decimals)
    except DecimalException as exc:
        raise InvalidAmountError(amount, "out of range") from exc
    if scaled != scaled.to_integral_value():
        raise InvalidAmountError(
            amount, f"more than {decimals} fractional digits"
        )
    return int(scaled)


def from_base_units(amount: int, decimals: int) -> Decimal:
    """Convert integer base units to a display-unit Decimal."""
    return _scale(Decimal(int(amount)), -decimals)


@dataclass(frozen=True)
class TokenConfig:
    """Static metadata for a token type."""

    token_type: TokenType
    symbol: str
    display_name: str
    decimals: int
    ledger_address: str

    def to_base_units(self, amount: AmountLike) -> int:
        return to_base_units(amount, self.decimals)

    def from_base_units(self, amount: int) -> Decimal:
        return from_base_units(amount, self.decimals)


TOKEN_CONFIGS: dict[TokenType, TokenConfig] = {
    TokenType.ICP: TokenConfig(
        token_type=TokenType.ICP,
        symbol="ICP",
        display_name="ICP",
        decimals=8,
        ledger_address="ryjl3-tyaaa-aaaaa-aaaba-cai",
    ),
    TokenType.CKUSDC: TokenConfig(
        token_type=TokenType.CKUSDC,
        symbol="ckUSDC",
        display_name="ckUSDC",
        decimals=6,
        ledger_address="xevnm-gaaaa-aaaar-qafnq-cai",
    ),
    TokenType.CKUSDT: TokenConfig(
        token_type=TokenType.CKUSDT,
        symbol="ckUSDT",
        display_name="ckUSDT",
        decimals=6,
        ledger_address="cngnf-vqaaa-aaaar-qag4q-cai",
    ),
    TokenType.CKBTC: TokenConfig(
        token_type=TokenType.CKBTC,
        symbol="ckBTC",
        display_name="ckBTC",
        decimals=8,
        ledger_address="mxzaz-hqaaa-aaaar-qaada-cai",
    ),
}


def parse_token_type(value: Union[TokenType, str]) -> TokenType:
    """Coerce a wire tag or enum member into a TokenType."""
    if isinstance(value, TokenType):
        return value
    try:
        return TokenType(value)
    except ValueError as exc:
        raise UnsupportedTokenError(value) from exc


def get_token_config(token_type: Union[TokenType, str]) -> TokenConfig:
    try:
        return TOKEN_CONFIGS[parse_token_type(token_type)]
    except KeyError as exc:
        raise UnsupportedTokenError(token_type) from exc


def get_supported_tokens() -> list[TokenType]:
    return list(TOKEN_CONFIGS.keys())


class RegisteredToken(VaultModel):
    """A token type known to a vault instance."""

    token_type: TokenType
    ledger_address: str
    display_name: str


class TokenBalance(VaultModel):
    """Outstanding (not yet swept) balance of one token type."""

    token_type: TokenType
    display_name: str
    amount: int = Field(ge=0)
    decimals: int

    @property
    def display_amount(self) -> Decimal:
        """Amount expressed in the token's display unit."""
        return from_base_units(self.amount, self.decimals)
