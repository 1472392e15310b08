"""Read-only view over the vault's transaction log."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models.errors import LedgerUnavailableError
from ..models.ledger import LedgerEntry
from ..models.token import TokenType, parse_token_type
from .base import BaseResource

logger = logging.getLogger(__name__)


def ordering_violations(entries: Sequence[LedgerEntry]) -> list[int]:
    """Positions whose index does not strictly exceed the previous entry's."""
    return [
        position
        for position in range(1, len(entries))
        if entries[position].index <= entries[position - 1].index
    ]


def group_by_token(entries: Sequence[LedgerEntry]) -> dict[TokenType, list[LedgerEntry]]:
    """Group entries by token type, preserving log order within each group."""
    groups: dict[TokenType, list[LedgerEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.token_type, []).append(entry)
    return groups


class TransactionLedgerView(BaseResource):
    """Fetches the append-only transaction log and filters it client-side.

    Entries are returned in the order the vault delivers them (ascending
    index). The view never re-sorts; out-of-order deliveries are logged.
    """

    async def fetch(self, up_to_index: Optional[int] = None) -> list[LedgerEntry]:
        """Fetch the transaction log.

        Args:
            up_to_index: Exclusive upper bound on entry indices; the vault's
                full retained log when omitted

        Raises:
            LedgerUnavailableError: On any remote failure
        """
        if up_to_index is not None and up_to_index < 0:
            raise ValueError(f"up_to_index must be non-negative, got {up_to_index}")
        entries = await self._call(
            "fetch_transactions",
            LedgerUnavailableError,
            self._service.fetch_transactions,
            up_to_index,
        )
        violations = ordering_violations(entries)
        if violations:
            logger.warning(
                "Vault delivered %d transaction(s) out of index order at positions %s",
                len(violations), violations[:10],
            )
        return entries

    async def by_token_type(
        self,
        token_type: TokenType,
        entries: Optional[Sequence[LedgerEntry]] = None,
    ) -> list[LedgerEntry]:
        """Entries of one token type.

        Args:
            token_type: Token to filter on
            entries: Previously fetched log; fetched now when omitted
        """
        token_type = parse_token_type(token_type)
        if entries is None:
            entries = await self.fetch()
        return [entry for entry in entries if entry.token_type is token_type]

    async def group_by_token(
        self, entries: Optional[Sequence[LedgerEntry]] = None
    ) -> dict[TokenType, list[LedgerEntry]]:
        if entries is None:
            entries = await self.fetch()
        return group_by_token(entries)

    async def outstanding(
        self,
        token_type: Optional[TokenType] = None,
        entries: Optional[Sequence[LedgerEntry]] = None,
    ) -> list[LedgerEntry]:
        """Entries that have not been swept yet."""
        if token_type is not None:
            candidates = await self.by_token_type(token_type, entries)
        elif entries is None:
            candidates = await self.fetch()
        else:
            candidates = list(entries)
        return [entry for entry in candidates if entry.is_outstanding]

    async def find(
        self,
        tx_hash: str,
        entries: Optional[Sequence[LedgerEntry]] = None,
    ) -> Optional[LedgerEntry]:
        """Look up an entry by transaction hash."""
        if entries is None:
            entries = await self.fetch()
        for entry in entries:
            if entry.tx_hash == tx_hash:
                return entry
        return None

    @staticmethod
    def ordering_violations(entries: Sequence[LedgerEntry]) -> list[int]:
        return ordering_violations(entries)
