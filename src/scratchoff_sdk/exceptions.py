from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    SERVER = "server"
    UNKNOWN = "unknown"


@dataclass
class ApiError(Exception):
    """Base of the closed error taxonomy raised by the HTTP layer.

    Every subclass pins ``kind`` so callers can ``match error.kind`` instead of
    chaining ``isinstance`` checks. ``retryable`` drives :class:`RetryPolicy`.
    """

    code: str
    message: str
    status_code: int = 0
    details: object | None = None
    raw_payload: object | None = None

    kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN
    retryable: ClassVar[bool] = False

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class NetworkError(ApiError):
    """Transport failure or unreadable response body."""

    kind = ErrorKind.NETWORK
    retryable = True


class AuthenticationError(ApiError):
    """Token missing, invalid or expired. The session store has been cleared."""

    kind = ErrorKind.AUTHENTICATION


class ValidationError(ApiError):
    """Malformed request or payload."""

    kind = ErrorKind.VALIDATION


class ServerError(ApiError):
    """5xx server-side failures."""

    kind = ErrorKind.SERVER
    retryable = True


class RefreshCancelledError(RuntimeError):
    """A dashboard refresh was superseded before its results could be applied."""

    def __init__(self, store_id: int, generation: int) -> None:
        super().__init__(f"Refresh for store {store_id} superseded (generation {generation})")
        self.store_id = store_id
        self.generation = generation
