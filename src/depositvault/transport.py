"""
HTTP transport for the remote vault service.

:class:`HttpVaultService` implements :class:`~.service.VaultService` over a
JSON API. It never raises for remote conditions: HTTP errors, timeouts and
undecodable payloads all come back as :class:`~.models.result.Err` values.

Read-only calls are retried with exponential backoff on transport failures.
Mutating calls (registration, provisioning, sweeps, admin writes) are sent
exactly once; a timeout on one of them is reported as ``TIMEOUT`` so the
caller can treat the outcome as unknown.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, TypeVar

import httpx
from pydantic import ValidationError

from .config import VaultSettings
from .models.errors import ConfigurationMissingError
from .models.ledger import LedgerEntry
from .models.result import Err, Ok, RemoteFailureKind, Result
from .models.token import TokenType
from .service import ApiKeyCredentials, CredentialProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = "depositvault-python/0.1.0"


def _failure_from_response(response: httpx.Response) -> Err:
    """Map an HTTP error response onto a remote failure."""
    try:
        body = response.json()
    except ValueError:
        body = {"detail": response.text}

    error_data = body.get("error", body.get("detail", {})) if isinstance(body, dict) else body
    code: Optional[str] = None
    if isinstance(error_data, str):
        message = error_data
    elif isinstance(error_data, dict):
        message = error_data.get("message", "Unknown error")
        code = error_data.get("code")
    else:
        message = f"HTTP {response.status_code}"

    status = response.status_code
    if status == 409:
        kind = RemoteFailureKind.ALREADY_EXISTS
    elif status == 404:
        kind = RemoteFailureKind.NOT_FOUND
    elif status in (401, 403):
        kind = RemoteFailureKind.AUTHENTICATION
    elif status >= 500 or status == 429:
        kind = RemoteFailureKind.UNAVAILABLE
    else:
        kind = RemoteFailureKind.REJECTED
    return Err.of(kind, message or f"HTTP {status}", code=code)


def _decode(payload: Any, decoder: Callable[[Any], T]) -> Result[T]:
    try:
        return Ok(decoder(payload))
    except (KeyError, TypeError, ValueError, ValidationError) as exc:
        return Err.of(RemoteFailureKind.MALFORMED_RESPONSE, f"Unexpected response payload: {exc}")


def _decode_registered(payload: Any) -> list[tuple[TokenType, str]]:
    return [
        (TokenType(item["token_type"]), str(item["ledger_address"]))
        for item in payload["tokens"]
    ]


def _decode_entries(payload: Any) -> list[LedgerEntry]:
    return [LedgerEntry.model_validate(item) for item in payload["transactions"]]


def _decode_receipts(payload: Any) -> list[str]:
    return [str(receipt) for receipt in payload["receipts"]]


class HttpVaultService:
    """JSON-over-HTTP client for one vault instance.

    Args:
        vault_id: Vault instance identifier
        base_url: Vault API base URL
        credentials: Credential provider whose headers go on every request
        timeout: Request timeout in seconds
        read_retries: Retries for read-only calls on transport failures
        retry_base_delay: Initial backoff delay in seconds
    """

    def __init__(
        self,
        vault_id: str,
        base_url: str,
        credentials: Optional[CredentialProvider] = None,
        timeout: float = 30.0,
        read_retries: int = 2,
        retry_base_delay: float = 0.5,
    ):
        self.vault_id = vault_id
        self._base_url = base_url.rstrip("/")
        self._credentials = credentials
        self._timeout = timeout
        self._read_retries = read_retries
        self._retry_base_delay = retry_base_delay
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(
        cls,
        settings: VaultSettings,
        credentials: Optional[CredentialProvider] = None,
    ) -> "HttpVaultService":
        if credentials is None and settings.api_key:
            credentials = ApiKeyCredentials(settings.api_key)
        return cls(
            vault_id=settings.vault_id,
            base_url=settings.base_url,
            credentials=credentials,
            timeout=settings.timeout,
            read_retries=settings.read_retries,
            retry_base_delay=settings.retry_base_delay,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            }
            if self._credentials is not None:
                headers.update(self._credentials.auth_headers())
            self._client = httpx.AsyncClient(headers=headers, timeout=self._timeout)
        return self._client

    def _url(self, path: str) -> str:
        if not self.vault_id:
            raise ConfigurationMissingError("vault_id", "Vault instance identifier is undefined")
        return f"{self._base_url}/v1/vaults/{self.vault_id}{path}"

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Result[Any]:
        client = await self._get_client()
        try:
            response = await client.request(method, self._url(path), params=params, json=json)
        except httpx.TimeoutException as exc:
            return Err.of(RemoteFailureKind.TIMEOUT, f"{method} {path} timed out: {exc}")
        except httpx.RequestError as exc:
            return Err.of(RemoteFailureKind.UNAVAILABLE, f"{method} {path} failed: {exc}")

        if response.status_code >= 400:
            return _failure_from_response(response)
        if response.status_code == 204 or not response.content:
            return Ok({})
        try:
            return Ok(response.json())
        except ValueError:
            return Err.of(RemoteFailureKind.MALFORMED_RESPONSE, f"{method} {path} returned invalid JSON")

    async def _read(self, path: str, params: Optional[dict[str, Any]] = None) -> Result[Any]:
        """GET with retry on transport failures."""
        delay = self._retry_base_delay
        for attempt in range(self._read_retries + 1):
            result = await self._send("GET", path, params=params)
            if result.is_ok or not result.failure.kind.is_transport:
                return result
            if attempt < self._read_retries:
                logger.debug(
                    "Retrying GET %s after %s (attempt %d/%d)",
                    path, result.failure.kind.value, attempt + 1, self._read_retries,
                )
                await asyncio.sleep(delay)
                delay *= 2
        return result

    async def _write(self, method: str, path: str, json: Optional[dict[str, Any]] = None) -> Result[Any]:
        """Mutating request, sent exactly once."""
        return await self._send(method, path, json=json)

    @staticmethod
    def _then(result: Result[Any], decoder: Callable[[Any], T]) -> Result[T]:
        if not result.is_ok:
            return result
        return _decode(result.value, decoder)

    # ==================== Tokens ====================

    async def list_registered_tokens(self) -> Result[list[tuple[TokenType, str]]]:
        return self._then(await self._read("/tokens"), _decode_registered)

    async def register_token(self, token_type: TokenType, ledger_address: str) -> Result[None]:
        result = await self._write(
            "POST",
            "/tokens",
            {"token_type": token_type.value, "ledger_address": ledger_address},
        )
        return self._then(result, lambda _: None)

    # ==================== Subaccounts ====================

    async def next_allocation_index(self) -> Result[int]:
        return self._then(await self._read("/nonce"), lambda p: int(p["nonce"]))

    async def ensure_subaccount(self, token_type: TokenType, allocation_index: int) -> Result[str]:
        result = await self._write(
            "PUT",
            "/subaccounts",
            {"token_type": token_type.value, "index": allocation_index},
        )
        return self._then(result, lambda p: str(p["subaccount_id"]))

    async def get_subaccount_id(self, token_type: TokenType, allocation_index: int) -> Result[str]:
        result = await self._read(
            f"/subaccounts/by-index/{allocation_index}",
            params={"token_type": token_type.value},
        )
        return self._then(result, lambda p: str(p["subaccount_id"]))

    async def render_deposit_address(self, subaccount_id: str) -> Result[str]:
        result = await self._read(f"/subaccounts/{subaccount_id}/address")
        return self._then(result, lambda p: str(p["address"]))

    # ==================== Transaction log ====================

    async def fetch_transactions(self, up_to_index: Optional[int] = None) -> Result[list[LedgerEntry]]:
        params = {"up_to_index": up_to_index} if up_to_index is not None else None
        return self._then(await self._read("/transactions", params=params), _decode_entries)

    # ==================== Sweeps ====================

    async def sweep_all(self) -> Result[list[str]]:
        return self._then(await self._write("POST", "/sweeps", {}), _decode_receipts)

    async def sweep_by_token(self, token_type: TokenType) -> Result[list[str]]:
        result = await self._write("POST", "/sweeps", {"token_type": token_type.value})
        return self._then(result, _decode_receipts)

    async def sweep_one(self, tx_hash: str) -> Result[list[str]]:
        result = await self._write("POST", f"/transactions/{tx_hash}/sweep")
        return self._then(result, _decode_receipts)

    async def sweep_from_subaccount(
        self, subaccount_id: str, amount: int, token_type: TokenType
    ) -> Result[list[str]]:
        result = await self._write(
            "POST",
            f"/subaccounts/{subaccount_id}/sweep",
            {"amount": str(amount), "token_type": token_type.value},
        )
        return self._then(result, _decode_receipts)

    async def mark_failed(self, tx_hash: str) -> Result[list[str]]:
        result = await self._write("POST", f"/transactions/{tx_hash}/sweep-failed")
        return self._then(result, _decode_receipts)

    async def refund(self, transaction_index: int) -> Result[str]:
        result = await self._write("POST", "/refunds", {"transaction_index": transaction_index})
        return self._then(result, lambda p: str(p["message"]))

    # ==================== Administration ====================

    async def get_network(self) -> Result[str]:
        return self._then(await self._read("/network"), lambda p: str(p["network"]))

    async def get_vault_principal(self) -> Result[str]:
        return self._then(await self._read("/principal"), lambda p: str(p["principal"]))

    async def get_subaccount_count(self) -> Result[int]:
        return self._then(await self._read("/subaccounts/count"), lambda p: int(p["count"]))

    async def get_transactions_count(self) -> Result[int]:
        return self._then(await self._read("/transactions/count"), lambda p: int(p["count"]))

    async def get_transaction_token_type(self, tx_hash: str) -> Result[TokenType]:
        result = await self._read(f"/transactions/{tx_hash}/token-type")
        return self._then(result, lambda p: TokenType(p["token_type"]))

    async def get_webhook_url(self) -> Result[str]:
        return self._then(await self._read("/webhook"), lambda p: str(p["url"]))

    async def set_webhook_url(self, url: str) -> Result[str]:
        return self._then(await self._write("PUT", "/webhook", {"url": url}), lambda p: str(p["url"]))

    async def get_sweep_interval(self) -> Result[int]:
        return self._then(await self._read("/interval"), lambda p: int(p["seconds"]))

    async def set_sweep_interval(self, seconds: int) -> Result[int]:
        result = await self._write("PUT", "/interval", {"seconds": seconds})
        return self._then(result, lambda p: int(p["seconds"]))

    async def get_next_block(self) -> Result[int]:
        return self._then(await self._read("/blocks"), lambda p: int(p["next_block"]))

    async def get_oldest_block(self) -> Result[Optional[int]]:
        def decode(payload: Any) -> Optional[int]:
            oldest = payload.get("oldest_block")
            return int(oldest) if oldest is not None else None

        return self._then(await self._read("/blocks"), decode)

    async def validate_account(self, account: str) -> Result[bool]:
        result = await self._read("/accounts/validate", params={"account": account})
        return self._then(result, lambda p: bool(p["valid"]))

    async def clear_transactions(
        self,
        up_to_index: Optional[int] = None,
        up_to_timestamp_nanos: Optional[int] = None,
    ) -> Result[list[LedgerEntry]]:
        body: dict[str, Any] = {}
        if up_to_index is not None:
            body["up_to_index"] = up_to_index
        if up_to_timestamp_nanos is not None:
            body["up_to_timestamp_nanos"] = up_to_timestamp_nanos
        result = await self._write("POST", "/transactions/clear", body)
        return self._then(result, _decode_entries)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpVaultService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
