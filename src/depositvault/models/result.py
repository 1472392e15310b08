"""Result values returned across the remote vault service boundary."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


class RemoteFailureKind(str, Enum):
    """Classification of a remote failure."""

    REJECTED = "rejected"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    AUTHENTICATION = "authentication"
    MALFORMED_RESPONSE = "malformed_response"

    @property
    def is_transport(self) -> bool:
        """Whether the failure happened before the vault could answer."""
        return self in (RemoteFailureKind.UNAVAILABLE, RemoteFailureKind.TIMEOUT)


@dataclass(frozen=True)
class RemoteFailure:
    """Failure payload reported by the remote vault service."""

    kind: RemoteFailureKind
    message: str
    code: Optional[str] = None


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful remote call."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed remote call."""

    failure: RemoteFailure

    @property
    def is_ok(self) -> bool:
        return False

    @classmethod
    def of(
        cls,
        kind: RemoteFailureKind,
        message: str,
        code: Optional[str] = None,
    ) -> "Err":
        return cls(RemoteFailure(kind=kind, message=message, code=code))


Result = Union[Ok[T], Err]
