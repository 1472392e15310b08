"""Deposit address resolution across every onboarded token."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from ..models.errors import AggregationFailedError, RemoteError
from ..models.subaccount import (
    DepositAddress,
    DepositResolution,
    ResolutionFailure,
    ResolutionStage,
)
from ..models.token import RegisteredToken, TokenType, parse_token_type
from .base import BaseResource

logger = logging.getLogger(__name__)


class DepositAddressResolver(BaseResource):
    """Produces a deposit address for each token a vault accepts.

    Each token is resolved in four steps: read the allocation index, make
    sure the token is registered, provision the subaccount, render its
    external address. A failure in any step only drops that token.
    """

    async def resolve_all(
        self,
        token_types: Optional[Iterable[TokenType]] = None,
        allocation_index: Optional[int] = None,
    ) -> DepositResolution:
        """Resolve deposit addresses.

        Args:
            token_types: Tokens to onboard; defaults to every token already
                registered with the vault
            allocation_index: Slot to provision; defaults to the vault's
                allocation counter, read once per token

        Returns:
            DepositResolution with one address per fully resolved token and
            one failure record per token that failed

        Raises:
            AggregationFailedError: If the registry listing fails
        """
        try:
            registered = await self._client.tokens.list_registered()
        except RemoteError as exc:
            raise AggregationFailedError(
                f"Failed to get registered tokens: {exc.reason}",
                failure_kind=exc.failure_kind,
            ) from exc

        registered_by_type = {token.token_type: token for token in registered}
        if token_types is None:
            targets = [token.token_type for token in registered]
        else:
            targets = list(dict.fromkeys(parse_token_type(t) for t in token_types))

        resolution = DepositResolution()
        for token_type in targets:
            try:
                address = await self._resolve_one(
                    token_type, registered_by_type.get(token_type), allocation_index
                )
            except _StageFailure as failure:
                logger.warning(
                    "Deposit address resolution for %s failed at %s: %s",
                    token_type.value, failure.stage.value, failure.error,
                )
                resolution.failures.append(
                    ResolutionFailure(token_type=token_type, stage=failure.stage, error=failure.error)
                )
                continue
            resolution.addresses.append(address)
        return resolution

    async def resolve(self, token_type: TokenType, allocation_index: Optional[int] = None) -> DepositAddress:
        """Resolve the deposit address for a single token.

        Raises:
            RemoteError: The typed error of whichever step failed
        """
        token_type = parse_token_type(token_type)
        registered = await self._client.tokens.get(token_type)
        try:
            return await self._resolve_one(token_type, registered, allocation_index)
        except _StageFailure as failure:
            raise failure.error from None

    async def _resolve_one(
        self,
        token_type: TokenType,
        registered: Optional[RegisteredToken],
        allocation_index: Optional[int],
    ) -> DepositAddress:
        provisioner = self._client.subaccounts

        index = allocation_index
        if index is None:
            with _stage(ResolutionStage.ALLOCATION_INDEX):
                index = await provisioner.next_allocation_index()

        if registered is None:
            with _stage(ResolutionStage.REGISTRATION):
                registered = await self._client.tokens.ensure_registered(token_type)

        with _stage(ResolutionStage.PROVISIONING):
            handle = await provisioner.ensure_subaccount(token_type, index)

        with _stage(ResolutionStage.ADDRESS):
            external_address = await provisioner.render_deposit_address(handle)

        return DepositAddress(
            token_type=token_type,
            display_name=registered.display_name,
            subaccount_id=handle.subaccount_id,
            external_address=external_address,
        )


class _StageFailure(Exception):
    def __init__(self, stage: ResolutionStage, error: RemoteError):
        super().__init__(str(error))
        self.stage = stage
        self.error = error


@contextmanager
def _stage(stage: ResolutionStage) -> Iterator[None]:
    """Tag remote errors raised inside the block with a resolution stage."""
    try:
        yield
    except RemoteError as exc:
        raise _StageFailure(stage, exc) from exc
