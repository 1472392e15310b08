"""
Pytest configuration and fixtures for depositvault tests.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx
import pytest

from depositvault import ApiKeyCredentials, HttpVaultService, VaultClient, VaultSettings
from depositvault.models.ledger import LedgerEntry, Mint, Operation, SweepStatus, Transfer
from depositvault.models.result import Err, Ok, RemoteFailureKind, Result
from depositvault.models.token import TokenType

VAULT_ID = "uiz2m-baaaa-aaaal-qjbxq-cai"
BASE_URL = "https://vault.test"


# ==================== In-memory vault service ====================


@dataclass
class _Injected:
    method: str
    failure: Err
    when: Optional[Callable[..., bool]] = None
    remaining: Optional[int] = 1


class FakeVaultService:
    """In-memory vault implementing the VaultService protocol.

    Failures can be injected per method (optionally only for matching
    arguments), and every call is recorded in ``calls``.
    """

    def __init__(self, vault_id: str = VAULT_ID):
        self.vault_id = vault_id
        self.registered: dict[TokenType, str] = {}
        self.subaccounts: dict[tuple[TokenType, int], str] = {}
        self.transactions: list[LedgerEntry] = []
        self.nonce = 0
        self.network = "Local"
        self.webhook_url = ""
        self.interval = 500
        self.next_block = 1
        self.duplicate_registration_errors = False
        self.duplicate_subaccount_errors = False
        self.calls: list[tuple[str, tuple]] = []
        self.closed = False
        self._injected: list[_Injected] = []

    # ----- test helpers -----

    def fail(
        self,
        method: str,
        kind: RemoteFailureKind = RemoteFailureKind.REJECTED,
        message: str = "injected failure",
        when: Optional[Callable[..., bool]] = None,
        times: Optional[int] = 1,
    ) -> None:
        """Make ``method`` fail; ``times=None`` fails every matching call."""
        self._injected.append(_Injected(method, Err.of(kind, message), when, times))

    def call_count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def inject_transaction(
        self,
        token_type: TokenType,
        operation: Optional[Operation],
        sweep_status: SweepStatus = SweepStatus.NOT_SWEPT,
        tx_hash: Optional[str] = None,
    ) -> LedgerEntry:
        index = len(self.transactions)
        entry = LedgerEntry(
            index=index,
            token_type=token_type,
            operation=operation,
            sweep_status=sweep_status,
            created_at_nanos=1_700_000_000_000_000_000 + index,
            tx_hash=tx_hash or hashlib.sha256(f"tx-{index}".encode()).hexdigest(),
            memo=index,
        )
        self.transactions.append(entry)
        return entry

    def mint(self, token_type: TokenType, amount: int, **kwargs: Any) -> LedgerEntry:
        return self.inject_transaction(token_type, Mint(to="ab" * 32, amount=amount), **kwargs)

    def transfer(self, token_type: TokenType, amount: int, **kwargs: Any) -> LedgerEntry:
        operation = Transfer(from_account="cd" * 32, to="ab" * 32, amount=amount, fee=10_000)
        return self.inject_transaction(token_type, operation, **kwargs)

    def status_of(self, tx_hash: str) -> SweepStatus:
        for entry in self.transactions:
            if entry.tx_hash == tx_hash:
                return entry.sweep_status
        raise KeyError(tx_hash)

    def _enter(self, method: str, *args: Any) -> Optional[Err]:
        self.calls.append((method, args))
        for injected in self._injected:
            if injected.method != method or injected.remaining == 0:
                continue
            if injected.when is not None and not injected.when(*args):
                continue
            if injected.remaining is not None:
                injected.remaining -= 1
            return injected.failure
        return None

    def _set_status(self, predicate: Callable[[LedgerEntry], bool], status: SweepStatus) -> list[str]:
        receipts = []
        for position, entry in enumerate(self.transactions):
            if entry.sweep_status is SweepStatus.NOT_SWEPT and predicate(entry):
                self.transactions[position] = entry.model_copy(update={"sweep_status": status})
                receipts.append(entry.tx_hash)
        return receipts

    # ----- tokens -----

    async def list_registered_tokens(self) -> Result[list[tuple[TokenType, str]]]:
        return self._enter("list_registered_tokens") or Ok(list(self.registered.items()))

    async def register_token(self, token_type: TokenType, ledger_address: str) -> Result[None]:
        failure = self._enter("register_token", token_type, ledger_address)
        if failure:
            return failure
        if token_type in self.registered and self.duplicate_registration_errors:
            return Err.of(RemoteFailureKind.ALREADY_EXISTS, "Token already registered")
        self.registered[token_type] = ledger_address
        return Ok(None)

    # ----- subaccounts -----

    async def next_allocation_index(self) -> Result[int]:
        return self._enter("next_allocation_index") or Ok(self.nonce)

    def _subaccount_id(self, token_type: TokenType, index: int) -> str:
        digest = hashlib.sha256(f"{self.vault_id}:{token_type.value}:{index}".encode()).hexdigest()
        return f"0x{digest[:16]}"

    async def ensure_subaccount(self, token_type: TokenType, allocation_index: int) -> Result[str]:
        failure = self._enter("ensure_subaccount", token_type, allocation_index)
        if failure:
            return failure
        key = (token_type, allocation_index)
        if key in self.subaccounts:
            if self.duplicate_subaccount_errors:
                return Err.of(RemoteFailureKind.ALREADY_EXISTS, "Subaccount already exists")
            return Ok(self.subaccounts[key])
        self.subaccounts[key] = self._subaccount_id(token_type, allocation_index)
        self.nonce = max(self.nonce, allocation_index + 1)
        return Ok(self.subaccounts[key])

    async def get_subaccount_id(self, token_type: TokenType, allocation_index: int) -> Result[str]:
        failure = self._enter("get_subaccount_id", token_type, allocation_index)
        if failure:
            return failure
        key = (token_type, allocation_index)
        if key not in self.subaccounts:
            return Err.of(RemoteFailureKind.NOT_FOUND, "Subaccount not found")
        return Ok(self.subaccounts[key])

    async def render_deposit_address(self, subaccount_id: str) -> Result[str]:
        return self._enter("render_deposit_address", subaccount_id) or Ok(
            f"{self.vault_id}-{subaccount_id[2:9]}.{subaccount_id[2:]}"
        )

    # ----- transaction log -----

    async def fetch_transactions(self, up_to_index: Optional[int] = None) -> Result[list[LedgerEntry]]:
        failure = self._enter("fetch_transactions", up_to_index)
        if failure:
            return failure
        if up_to_index is None:
            return Ok(list(self.transactions))
        return Ok([entry for entry in self.transactions if entry.index < up_to_index])

    # ----- sweeps -----

    async def sweep_all(self) -> Result[list[str]]:
        return self._enter("sweep_all") or Ok(self._set_status(lambda e: True, SweepStatus.SWEPT))

    async def sweep_by_token(self, token_type: TokenType) -> Result[list[str]]:
        return self._enter("sweep_by_token", token_type) or Ok(
            self._set_status(lambda e: e.token_type is token_type, SweepStatus.SWEPT)
        )

    async def sweep_one(self, tx_hash: str) -> Result[list[str]]:
        return self._enter("sweep_one", tx_hash) or Ok(
            self._set_status(lambda e: e.tx_hash == tx_hash, SweepStatus.SWEPT)
        )

    async def sweep_from_subaccount(self, subaccount_id: str, amount: int, token_type: TokenType) -> Result[list[str]]:
        failure = self._enter("sweep_from_subaccount", subaccount_id, amount, token_type)
        if failure:
            return failure
        return Ok([str(self.next_block)])

    async def mark_failed(self, tx_hash: str) -> Result[list[str]]:
        return self._enter("mark_failed", tx_hash) or Ok(
            self._set_status(lambda e: e.tx_hash == tx_hash, SweepStatus.FAILED_TO_SWEEP)
        )

    async def refund(self, transaction_index: int) -> Result[str]:
        failure = self._enter("refund", transaction_index)
        if failure:
            return failure
        if not self._set_status(lambda e: e.index == transaction_index, SweepStatus.SWEPT):
            return Err.of(RemoteFailureKind.NOT_FOUND, "Transaction index is not found")
        return Ok("Refund completed")

    # ----- administration -----

    async def get_network(self) -> Result[str]:
        return self._enter("get_network") or Ok(self.network)

    async def get_vault_principal(self) -> Result[str]:
        return self._enter("get_vault_principal") or Ok(self.vault_id)

    async def get_subaccount_count(self) -> Result[int]:
        return self._enter("get_subaccount_count") or Ok(len(self.subaccounts))

    async def get_transactions_count(self) -> Result[int]:
        return self._enter("get_transactions_count") or Ok(len(self.transactions))

    async def get_transaction_token_type(self, tx_hash: str) -> Result[TokenType]:
        failure = self._enter("get_transaction_token_type", tx_hash)
        if failure:
            return failure
        for entry in self.transactions:
            if entry.tx_hash == tx_hash:
                return Ok(entry.token_type)
        return Err.of(RemoteFailureKind.NOT_FOUND, "Transaction not found")

    async def get_webhook_url(self) -> Result[str]:
        return self._enter("get_webhook_url") or Ok(self.webhook_url)

    async def set_webhook_url(self, url: str) -> Result[str]:
        failure = self._enter("set_webhook_url", url)
        if failure:
            return failure
        self.webhook_url = url
        return Ok(url)

    async def get_sweep_interval(self) -> Result[int]:
        return self._enter("get_sweep_interval") or Ok(self.interval)

    async def set_sweep_interval(self, seconds: int) -> Result[int]:
        failure = self._enter("set_sweep_interval", seconds)
        if failure:
            return failure
        self.interval = seconds
        return Ok(seconds)

    async def get_next_block(self) -> Result[int]:
        return self._enter("get_next_block") or Ok(self.next_block)

    async def get_oldest_block(self) -> Result[Optional[int]]:
        failure = self._enter("get_oldest_block")
        if failure:
            return failure
        return Ok(self.transactions[0].index if self.transactions else None)

    async def validate_account(self, account: str) -> Result[bool]:
        return self._enter("validate_account", account) or Ok(account.startswith(self.vault_id))

    async def clear_transactions(
        self,
        up_to_index: Optional[int] = None,
        up_to_timestamp_nanos: Optional[int] = None,
    ) -> Result[list[LedgerEntry]]:
        failure = self._enter("clear_transactions", up_to_index, up_to_timestamp_nanos)
        if failure:
            return failure
        if up_to_index is None and up_to_timestamp_nanos is None:
            self.transactions = []
        else:
            self.transactions = [
                entry
                for entry in self.transactions
                if not (
                    (up_to_index is not None and entry.index < up_to_index)
                    or (up_to_timestamp_nanos is not None and entry.created_at_nanos < up_to_timestamp_nanos)
                )
            ]
        return Ok(list(self.transactions))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> VaultSettings:
    """Settings isolated from the environment."""
    return VaultSettings(_env_file=None, vault_id=VAULT_ID, base_url=BASE_URL, api_key="test-api-key")


@pytest.fixture
def service() -> FakeVaultService:
    return FakeVaultService()


@pytest.fixture
def make_service() -> Callable[..., FakeVaultService]:
    """Factory for additional in-memory vaults."""
    return FakeVaultService


@pytest.fixture
def client(service: FakeVaultService, settings: VaultSettings) -> VaultClient:
    return VaultClient(service, settings)


# ==================== HTTP mocking ====================


class _LocalHTTPXMock:
    """Queue of canned responses for ``httpx.AsyncClient.request``."""

    def __init__(self) -> None:
        self._queue: list[tuple[str, str, httpx.Response | Exception]] = []
        self.requests: list[dict[str, Any]] = []

    def add_response(
        self,
        *,
        url: str,
        method: str = "GET",
        status_code: int = 200,
        json: Any = None,
        content: bytes = b"",
    ) -> None:
        if json is not None:
            response = httpx.Response(status_code, json=json)
        else:
            response = httpx.Response(status_code, content=content)
        self._queue.append((method.upper(), str(httpx.URL(url)), response))

    def add_exception(self, exception: Exception, *, url: str, method: str = "GET") -> None:
        self._queue.append((method.upper(), str(httpx.URL(url)), exception))

    def _pop_match(self, method: str, url: str) -> httpx.Response | Exception:
        for idx, (queued_method, queued_url, outcome) in enumerate(self._queue):
            if queued_method == method.upper() and queued_url == url:
                del self._queue[idx]
                return outcome
        raise AssertionError(
            f"No mocked response for {method} {url}. "
            f"Available: {[f'{m} {u}' for m, u, _ in self._queue]}"
        )


@pytest.fixture
def httpx_mock(monkeypatch):
    """Patch ``httpx.AsyncClient.request`` with queued responses."""
    mock = _LocalHTTPXMock()

    async def _async_request(self, method, url, params=None, **kwargs):
        full_url = str(httpx.URL(str(url), params=params))
        mock.requests.append(
            {"method": method, "url": full_url, "json": kwargs.get("json"), "headers": dict(self.headers)}
        )
        outcome = mock._pop_match(method, full_url)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(httpx.AsyncClient, "request", _async_request)
    return mock


@pytest.fixture
async def http_service():
    """HTTP vault service with retries disabled."""
    service = HttpVaultService(
        vault_id=VAULT_ID,
        base_url=BASE_URL,
        credentials=ApiKeyCredentials("test-api-key"),
        read_retries=0,
    )
    yield service
    await service.close()
