"""Sweep orchestration.

Every sweep is a single remote call. Nothing here retries: the vault owns
sweep eligibility and decides, per entry, whether a sweep still applies,
so callers can safely re-issue a whole sweep themselves.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Union

from ..models.errors import InvalidAmountError, SweepFailedError
from ..models.sweep import SweepOutcome, SweepScope
from ..models.token import TokenType, get_token_config, parse_token_type
from .base import BaseResource

logger = logging.getLogger(__name__)


class SweepOrchestrator(BaseResource):
    """Issues sweeps at vault, token, transaction and subaccount granularity.

    Successful calls return a classified :class:`SweepOutcome`. Remote
    rejections raise :class:`SweepFailedError`; when the call timed out its
    ``outcome_unknown`` flag is set.
    """

    async def sweep_all(self) -> SweepOutcome:
        """Sweep every eligible entry across all tokens."""
        receipts = await self._call("sweep_all", SweepFailedError, self._service.sweep_all)
        return self._record(SweepOutcome.from_receipts(SweepScope.VAULT, receipts))

    async def sweep_by_token(self, token_type: TokenType) -> SweepOutcome:
        """Sweep every eligible entry of one token type."""
        token_type = parse_token_type(token_type)
        receipts = await self._call(
            "sweep_by_token", SweepFailedError, self._service.sweep_by_token, token_type
        )
        return self._record(
            SweepOutcome.from_receipts(SweepScope.TOKEN, receipts, token_type=token_type)
        )

    async def sweep_one(self, tx_hash: str) -> SweepOutcome:
        """Sweep a single entry by transaction hash."""
        if not tx_hash:
            raise ValueError("tx_hash is required")
        receipts = await self._call("sweep_one", SweepFailedError, self._service.sweep_one, tx_hash)
        return self._record(
            SweepOutcome.from_receipts(SweepScope.TRANSACTION, receipts, target=tx_hash)
        )

    async def sweep_from_subaccount(
        self,
        subaccount_id: str,
        amount: Union[Decimal, str, int, float],
        token_type: TokenType = TokenType.ICP,
    ) -> SweepOutcome:
        """Sweep an explicit amount out of a subaccount.

        Args:
            subaccount_id: Subaccount to sweep from
            amount: Positive amount in the token's display unit, e.g.
                ``Decimal("0.1")`` ICP
            token_type: Token held by the subaccount

        Raises:
            InvalidAmountError: If the amount is not positive or is finer
                than the token's precision
            SweepFailedError: If the vault rejected the sweep
        """
        if not subaccount_id:
            raise ValueError("subaccount_id is required")
        config = get_token_config(token_type)
        base_units = config.to_base_units(amount)
        if base_units <= 0:
            raise InvalidAmountError(amount, "must be positive")

        receipts = await self._call(
            "sweep_from_subaccount",
            SweepFailedError,
            self._service.sweep_from_subaccount,
            subaccount_id,
            base_units,
            config.token_type,
        )
        return self._record(
            SweepOutcome.from_receipts(
                SweepScope.SUBACCOUNT, receipts, target=subaccount_id, token_type=config.token_type
            )
        )

    async def mark_failed(self, tx_hash: str) -> SweepOutcome:
        """Mark an entry as FailedToSweep without attempting settlement.

        The entry is excluded from future automatic sweeps. No operation in
        this package moves it back to NotSwept.
        """
        if not tx_hash:
            raise ValueError("tx_hash is required")
        receipts = await self._call("mark_failed", SweepFailedError, self._service.mark_failed, tx_hash)
        return self._record(
            SweepOutcome.from_receipts(SweepScope.MARK_FAILED, receipts, target=tx_hash)
        )

    async def refund(self, transaction_index: int) -> SweepOutcome:
        """Return a deposit to its sender instead of sweeping it.

        The vault transfers the entry's amount back to the originating
        account and marks the entry Swept.

        Args:
            transaction_index: Ledger index of the entry to refund

        Raises:
            ValueError: If ``transaction_index`` is negative
            SweepFailedError: If the vault rejected the refund; when the call
                timed out ``outcome_unknown`` is set
        """
        if transaction_index < 0:
            raise ValueError(f"transaction_index must be non-negative, got {transaction_index}")
        confirmation = await self._call(
            "refund", SweepFailedError, self._service.refund, transaction_index
        )
        return self._record(
            SweepOutcome.from_receipts(
                SweepScope.REFUND, [confirmation], target=str(transaction_index)
            )
        )

    async def sweep_tokens(self, token_types: Iterable[TokenType]) -> list[SweepOutcome]:
        """Sweep several token types, one call each.

        A failed sweep is recorded as a FAILED (or UNKNOWN, after a timeout)
        outcome and does not stop the remaining tokens.
        """
        outcomes = []
        for token_type in dict.fromkeys(parse_token_type(t) for t in token_types):
            try:
                outcome = await self.sweep_by_token(token_type)
            except SweepFailedError as exc:
                logger.warning("Sweep of %s failed: %s", token_type.value, exc)
                outcome = SweepOutcome.from_error(SweepScope.TOKEN, exc, token_type=token_type)
            outcomes.append(outcome)
        return outcomes

    @staticmethod
    def _record(outcome: SweepOutcome) -> SweepOutcome:
        label = outcome.target or (outcome.token_type.value if outcome.token_type else "vault")
        logger.info(
            "Sweep %s %s: %s (%d receipt(s))",
            outcome.scope.value, label, outcome.status.value, len(outcome.receipts),
        )
        return outcome
