"""Token registry: which token types a vault knows about."""
from __future__ import annotations

import logging
from typing import Optional

from ..models.errors import RegistrationFailedError, RemoteUnavailableError
from ..models.result import Err, RemoteFailureKind
from ..models.token import RegisteredToken, TokenType, get_token_config, parse_token_type
from .base import BaseResource

logger = logging.getLogger(__name__)


class TokenRegistry(BaseResource):
    """Idempotent token registration on top of the vault's register RPC.

    Example:
        ```python
        async with VaultClient.from_settings() as client:
            await client.tokens.ensure_registered(TokenType.ICP)
            tokens = await client.tokens.list_registered()
        ```
    """

    async def list_registered(self) -> list[RegisteredToken]:
        """List the tokens registered with the vault.

        At most one entry is returned per token type, in the order the vault
        reports them.

        Raises:
            ConfigurationMissingError: If no vault instance is configured
            RemoteUnavailableError: If the vault could not be queried
        """
        pairs = await self._call(
            "list_registered_tokens",
            RemoteUnavailableError,
            self._service.list_registered_tokens,
        )
        registered: dict[TokenType, RegisteredToken] = {}
        for token_type, ledger_address in pairs:
            if token_type in registered:
                logger.warning("Vault reported %s more than once; keeping the first entry", token_type.value)
                continue
            registered[token_type] = RegisteredToken(
                token_type=token_type,
                ledger_address=ledger_address,
                display_name=get_token_config(token_type).display_name,
            )
        return list(registered.values())

    async def get(self, token_type: TokenType) -> Optional[RegisteredToken]:
        """Return the registration for one token type, if any."""
        token_type = parse_token_type(token_type)
        for token in await self.list_registered():
            if token.token_type is token_type:
                return token
        return None

    async def ensure_registered(
        self,
        token_type: TokenType,
        ledger_address: Optional[str] = None,
    ) -> RegisteredToken:
        """Register a token unless the vault already knows it.

        Args:
            token_type: Token to register
            ledger_address: Settlement ledger address; defaults to the
                configured address for the token

        Returns:
            The registration now known to the vault

        Raises:
            UnsupportedTokenError: If the token type is unknown
            RemoteUnavailableError: If the registry could not be listed
            RegistrationFailedError: If the vault rejected the registration
        """
        config = get_token_config(token_type)
        token_type = config.token_type
        address = ledger_address or self._settings.ledger_address_for(token_type)

        existing = await self.get(token_type)
        if existing is not None:
            logger.debug("%s already registered; skipping", token_type.value)
            return existing

        result = await self._invoke(
            "register_token", self._service.register_token, token_type, address
        )
        if isinstance(result, Err):
            if (
                result.failure.kind is RemoteFailureKind.ALREADY_EXISTS
                and self._settings.tolerate_duplicate_errors
            ):
                logger.info("%s was registered concurrently; treating as registered", token_type.value)
            else:
                raise RegistrationFailedError.from_failure(
                    result.failure, details={"token_type": token_type.value}
                )
        else:
            logger.info("Registered %s with ledger %s", token_type.value, address)

        return RegisteredToken(
            token_type=token_type,
            ledger_address=address,
            display_name=config.display_name,
        )
