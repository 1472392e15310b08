"""Balance reconciliation from the raw transaction log."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models.ledger import LedgerEntry
from ..models.token import TokenBalance, TokenType, get_token_config, parse_token_type
from .base import BaseResource
from .ledger import group_by_token

logger = logging.getLogger(__name__)


def outstanding_amount(entries: Sequence[LedgerEntry]) -> int:
    """Sum the settlement amounts of entries that are not swept yet.

    Amounts are integer base units; the sum is exact.
    """
    total = 0
    for entry in entries:
        if entry.is_outstanding:
            total += entry.settlement_amount
    return total


class BalanceReconciler(BaseResource):
    """Folds the transaction log into per-token outstanding balances.

    A token's balance is the sum of the settlement amounts of its
    ``NotSwept`` mint and transfer entries. Approvals and burns contribute
    nothing. Balances are recomputed from the log on every call.
    """

    async def compute_balances(self, entries: Optional[Sequence[LedgerEntry]] = None) -> list[TokenBalance]:
        """Outstanding balance of every token with a non-zero balance.

        Args:
            entries: Previously fetched log; fetched now when omitted

        Returns:
            One TokenBalance per token with a positive outstanding amount,
            registered tokens first in registry order

        Raises:
            LedgerUnavailableError: If the log could not be fetched
            RemoteUnavailableError: If the registry could not be listed
        """
        if entries is None:
            entries = await self._client.ledger.fetch()
        totals = {
            token_type: outstanding_amount(group)
            for token_type, group in group_by_token(entries).items()
        }

        registered = await self._client.tokens.list_registered()
        display_names = {token.token_type: token.display_name for token in registered}
        order = [token.token_type for token in registered]
        order += [token_type for token_type in totals if token_type not in display_names]

        balances = []
        for token_type in order:
            amount = totals.get(token_type, 0)
            if amount <= 0:
                continue
            if token_type not in display_names:
                logger.warning(
                    "Ledger holds %s deposits but the token is not registered with the vault",
                    token_type.value,
                )
            balances.append(self._balance(token_type, amount, display_names.get(token_type)))
        return balances

    async def balances_for_token(
        self,
        token_type: TokenType,
        entries: Optional[Sequence[LedgerEntry]] = None,
    ) -> TokenBalance:
        """Outstanding balance of one token; zero when nothing is pending."""
        token_type = parse_token_type(token_type)
        token_entries = await self._client.ledger.by_token_type(token_type, entries)
        return self._balance(token_type, outstanding_amount(token_entries))

    @staticmethod
    def _balance(token_type: TokenType, amount: int, display_name: Optional[str] = None) -> TokenBalance:
        config = get_token_config(token_type)
        return TokenBalance(
            token_type=token_type,
            display_name=display_name or config.display_name,
            amount=amount,
            decimals=config.decimals,
        )
