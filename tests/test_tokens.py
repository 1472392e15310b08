"""Tests for token metadata and amount conversion."""
from decimal import Decimal

import pytest

from depositvault import (
    TOKEN_CONFIGS,
    InvalidAmountError,
    TokenBalance,
    TokenType,
    UnsupportedTokenError,
    from_base_units,
    get_token_config,
    to_base_units,
)
from depositvault.models.token import get_supported_tokens, parse_token_type


class TestTokenConfigs:
    """Tests for static token metadata."""

    def test_every_token_has_a_config(self):
        """Should carry metadata for every token type."""
        assert set(TOKEN_CONFIGS) == set(TokenType)
        assert get_supported_tokens() == [
            TokenType.ICP,
            TokenType.CKUSDC,
            TokenType.CKUSDT,
            TokenType.CKBTC,
        ]

    def test_decimals(self):
        """Should use the settlement ledger precision of each token."""
        assert get_token_config(TokenType.ICP).decimals == 8
        assert get_token_config(TokenType.CKUSDC).decimals == 6
        assert get_token_config(TokenType.CKUSDT).decimals == 6
        assert get_token_config(TokenType.CKBTC).decimals == 8

    def test_default_ledger_addresses(self):
        """Should know the default settlement ledger of each token."""
        assert get_token_config(TokenType.ICP).ledger_address == "ryjl3-tyaaa-aaaaa-aaaba-cai"
        assert get_token_config(TokenType.CKUSDC).ledger_address == "xevnm-gaaaa-aaaar-qafnq-cai"
        assert get_token_config(TokenType.CKUSDT).ledger_address == "cngnf-vqaaa-aaaar-qag4q-cai"
        assert get_token_config(TokenType.CKBTC).ledger_address == "mxzaz-hqaaa-aaaar-qaada-cai"

    def test_lookup_by_wire_tag(self):
        """Should accept wire tags as well as enum members."""
        assert get_token_config("CKBTC").display_name == "ckBTC"
        assert parse_token_type("ICP") is TokenType.ICP

    def test_unknown_token(self):
        """Should reject token types outside the supported set."""
        with pytest.raises(UnsupportedTokenError) as exc_info:
            get_token_config("DOGE")

        assert exc_info.value.code == "UNSUPPORTED_TOKEN"
        assert isinstance(exc_info.value, ValueError)


class TestToBaseUnits:
    """Tests for display-unit to base-unit conversion."""

    def test_tenth_of_icp(self):
        """Should convert 0.1 ICP to 10_000_000 base units."""
        assert to_base_units(Decimal("0.1"), 8) == 10_000_000
        assert to_base_units("0.1", 8) == 10_000_000
        assert get_token_config(TokenType.ICP).to_base_units("0.1") == 10_000_000

    def test_float_input_is_exact(self):
        """Should not carry binary float error into base units."""
        assert to_base_units(0.1, 8) == 10_000_000
        assert to_base_units(0.3, 6) == 300_000

    def test_integers(self):
        """Should scale whole amounts."""
        assert to_base_units(1, 8) == 100_000_000
        assert to_base_units(0, 6) == 0

    def test_large_amounts_are_exact(self):
        """Should convert amounts beyond float precision without rounding."""
        amount = "123456789012345678901234567890.12345678"
        assert to_base_units(amount, 8) == 12345678901234567890123456789012345678

    def test_too_many_fractional_digits(self):
        """Should reject amounts finer than the token's precision."""
        with pytest.raises(InvalidAmountError) as exc_info:
            to_base_units("0.0000001", 6)

        assert "fractional digits" in exc_info.value.reason

    @pytest.mark.parametrize("amount", ["-1", "NaN", "Infinity", "abc", True, None])
    def test_invalid_amounts(self, amount):
        """Should reject negative, non-finite and non-numeric amounts."""
        with pytest.raises(InvalidAmountError):
            to_base_units(amount, 8)

    @pytest.mark.parametrize("amount", ["1e999999", "1E+999995", "1e-1000100"])
    def test_out_of_range_amounts(self, amount):
        """Should reject amounts whose scale exceeds the decimal range."""
        with pytest.raises(InvalidAmountError) as exc_info:
            to_base_units(amount, 8)

        assert exc_info.value.code == "INVALID_AMOUNT"


class TestFromBaseUnits:
    """Tests for base-unit to display-unit conversion."""

    def test_tenth_of_icp(self):
        """Should convert 10_000_000 base units back to 0.1 ICP."""
        assert from_base_units(10_000_000, 8) == Decimal("0.1")

    @pytest.mark.parametrize(
        "amount,decimals",
        [("0.1", 8), ("0.00000001", 8), ("21000000", 8), ("1234.567891", 6)],
    )
    def test_round_trip(self, amount, decimals):
        """Should return the starting amount after a round trip."""
        assert from_base_units(to_base_units(amount, decimals), decimals) == Decimal(amount)

    def test_large_amounts_are_exact(self):
        """Should not lose digits on very large balances."""
        assert from_base_units(10**40 + 1, 8) == Decimal(f"{10**32}.00000001")


class TestTokenBalance:
    """Tests for the TokenBalance model."""

    def test_display_amount(self):
        """Should expose the amount in display units."""
        balance = TokenBalance(
            token_type=TokenType.CKUSDC,
            display_name="ckUSDC",
            amount=1_500_000,
            decimals=6,
        )

        assert balance.display_amount == Decimal("1.5")
        assert balance.to_dict() == {
            "token_type": "CKUSDC",
            "display_name": "ckUSDC",
            "amount": 1_500_000,
            "decimals": 6,
        }

    def test_negative_amount_rejected(self):
        """Should never hold a negative balance."""
        with pytest.raises(ValueError):
            TokenBalance(token_type=TokenType.ICP, display_name="ICP", amount=-1, decimals=8)
