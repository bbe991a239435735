"""LLM Base Classes and Shared Types"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Closed set of failure categories. Value is (name, retryable)."""
    AUTH = ("auth", False)
    RATE_LIMIT = ("rate_limit", False)
    SERVER_ERROR = ("server_error", True)
    DNS_FAILURE = ("dns_failure", True)
    CONNECTION_REFUSED = ("connection_refused", True)
    CONNECTION_RESET = ("connection_reset", True)
    TLS_HANDSHAKE_FAILURE = ("tls_handshake_failure", True)
    TIMEOUT = ("timeout", True)
    MALFORMED_RESPONSE = ("malformed_response", False)
    UNKNOWN = ("unknown", False)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def retryable(self) -> bool:
        return self.value[1]


@dataclass(frozen=True)
class RequestConfig:
    """Everything one logical call needs. Not mutated once built."""
    api_key: str = field(repr=False)
    host: str
    path: str
    body: dict[str, Any]
    timeout_ms: int
    proxy_url: str | None = None
    insecure_tls: bool = False
    max_retries: int = 2

    def __post_init__(self):
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

    @property
    def url(self) -> str:
        return f"https://{self.host}{self.path}"


@dataclass
class TransportResponse:
    """Status and raw body of one completed HTTP exchange, any status."""
    status: int
    body: str


@dataclass
class Attempt:
    """Outcome of a single transport attempt."""
    index: int
    status: int | None = None
    choices: list | None = None
    category: ErrorCategory | None = None
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.category is None


class LLMError(Exception):
    """Raised when LLM operations fail."""
    pass


class ClientError(LLMError):
    """Terminal failure of a completion request after classification and retries."""

    def __init__(self, category: ErrorCategory, message: str, attempts: list[Attempt] | None = None):
        super().__init__(message)
        self.category = category
        self.message = message
        self.attempts = attempts or []

    @property
    def retryable(self) -> bool:
        return self.category.retryable


class Transport(ABC):
    """Performs exactly one HTTP POST for a RequestConfig."""

    @abstractmethod
    def send(self, request: RequestConfig) -> TransportResponse:
        """Return the response for any HTTP status; raise on transport failure."""
        pass
