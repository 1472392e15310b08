"""
Base class for the vault orchestration components.

Each component holds a reference to the owning :class:`~..client.VaultClient`
and reaches the remote vault only through its service handle. Components keep
no state between calls.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Type, TypeVar

from ..models.errors import ConfigurationMissingError, RemoteError
from ..models.result import Err, Result

if TYPE_CHECKING:
    from ..client import VaultClient
    from ..config import VaultSettings
    from ..service import VaultService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseResource:
    """Base class for orchestration components.

    Attributes:
        _client: The owning client
    """

    def __init__(self, client: "VaultClient") -> None:
        self._client = client

    @property
    def _service(self) -> "VaultService":
        return self._client.service

    @property
    def _settings(self) -> "VaultSettings":
        return self._client.settings

    def _require_vault(self) -> str:
        """Return the vault instance identifier or fail fast."""
        vault_id = getattr(self._service, "vault_id", "")
        if not vault_id:
            raise ConfigurationMissingError("vault_id", "Vault instance identifier is undefined")
        return vault_id

    async def _invoke(
        self,
        operation: str,
        call: Callable[..., Awaitable[Result[T]]],
        *args: Any,
    ) -> Result[T]:
        """Run one remote call after the configuration check."""
        self._require_vault()
        logger.debug("Calling %s", operation)
        return await call(*args)

    async def _call(
        self,
        operation: str,
        error_cls: Type[RemoteError],
        call: Callable[..., Awaitable[Result[T]]],
        *args: Any,
    ) -> T:
        """Run one remote call and raise ``error_cls`` if it fails."""
        result = await self._invoke(operation, call, *args)
        return self._unwrap(operation, result, error_cls)

    @staticmethod
    def _unwrap(operation: str, result: Result[T], error_cls: Type[RemoteError]) -> T:
        if isinstance(result, Err):
            raise error_cls.from_failure(result.failure, details={"operation": operation})
        return result.value
