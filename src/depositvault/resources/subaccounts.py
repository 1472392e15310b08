"""Subaccount provisioning."""
from __future__ import annotations

import logging

from ..models.errors import ProvisioningFailedError
from ..models.result import Err, RemoteFailureKind
from ..models.subaccount import SubaccountHandle
from ..models.token import TokenType, parse_token_type
from .base import BaseResource

logger = logging.getLogger(__name__)


class SubaccountProvisioner(BaseResource):
    """Allocates deterministic per-token deposit subaccounts.

    The vault derives a subaccount id from (vault, token type, allocation
    index), so provisioning the same slot twice returns the same id.
    """

    async def next_allocation_index(self) -> int:
        """Read the vault's allocation counter.

        The value is advisory: two callers reading it concurrently may get
        the same index. Callers that need unique slots must serialize index
        acquisition themselves.
        """
        index = await self._call(
            "next_allocation_index",
            ProvisioningFailedError,
            self._service.next_allocation_index,
        )
        if index < 0:
            raise ProvisioningFailedError(f"Vault returned a negative allocation index: {index}")
        return index

    async def ensure_subaccount(self, token_type: TokenType, allocation_index: int) -> SubaccountHandle:
        """Allocate the subaccount for a slot, or fetch it if it exists.

        Raises:
            ValueError: If ``allocation_index`` is negative
            ProvisioningFailedError: If the vault could not provide the id
        """
        token_type = parse_token_type(token_type)
        if allocation_index < 0:
            raise ValueError(f"allocation_index must be non-negative, got {allocation_index}")

        result = await self._invoke(
            "ensure_subaccount", self._service.ensure_subaccount, token_type, allocation_index
        )
        if isinstance(result, Err):
            if not (
                result.failure.kind is RemoteFailureKind.ALREADY_EXISTS
                and self._settings.tolerate_duplicate_errors
            ):
                raise ProvisioningFailedError.from_failure(
                    result.failure,
                    details={"token_type": token_type.value, "allocation_index": allocation_index},
                )
            logger.debug(
                "Subaccount %s/%d already exists; fetching its id", token_type.value, allocation_index
            )
            subaccount_id = await self._call(
                "get_subaccount_id",
                ProvisioningFailedError,
                self._service.get_subaccount_id,
                token_type,
                allocation_index,
            )
        else:
            subaccount_id = result.value
            logger.info("Provisioned %s subaccount at index %d", token_type.value, allocation_index)

        if not subaccount_id:
            raise ProvisioningFailedError(
                f"Vault returned an empty subaccount id for {token_type.value}/{allocation_index}"
            )
        return SubaccountHandle(
            token_type=token_type,
            allocation_index=allocation_index,
            subaccount_id=subaccount_id,
        )

    async def render_deposit_address(self, handle: SubaccountHandle) -> str:
        """Render a subaccount as an external deposit address."""
        address = await self._call(
            "render_deposit_address",
            ProvisioningFailedError,
            self._service.render_deposit_address,
            handle.subaccount_id,
        )
        if not address:
            raise ProvisioningFailedError(
                f"Vault returned an empty deposit address for subaccount {handle.subaccount_id}"
            )
        return address
