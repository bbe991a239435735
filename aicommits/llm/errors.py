"""Error Classifier - Map raw transport and HTTP failures to an ErrorCategory."""

import errno
import http.client
import json
import socket
import ssl
import urllib.error

from aicommits.llm.base import ErrorCategory

_TLS_HELP = (
    "This could be due to:\n"
    "  • Network connectivity issues\n"
    "  • Proxy or firewall blocking the connection\n"
    "  • Corporate network restrictions\n\n"
    "Try:\n"
    "  • Checking your internet connection\n"
    "  • Configuring a proxy if needed: aicommits --proxy <proxy-url>\n"
    "  • Using --insecure-tls only if your network intercepts TLS on purpose"
)

# The only user-facing text for each category. Raw details are appended, never substituted.
ERROR_TEMPLATES = {
    ErrorCategory.AUTH: (
        "Invalid API key. The API rejected the request as unauthorized. "
        "Check the key in OPENAI_KEY or the api_key entry of ~/.aicommitsrc."
    ),
    ErrorCategory.RATE_LIMIT: (
        "API rate limit exceeded. Wait a moment before trying again, "
        "or check your usage at https://platform.openai.com/usage."
    ),
    ErrorCategory.SERVER_ERROR: (
        "The API had a server error (HTTP {status}). Please try again later "
        "or check the API status at https://status.openai.com."
    ),
    ErrorCategory.DNS_FAILURE: (
        "Failed to connect to the API because DNS resolution failed. "
        "Please check your internet connection and DNS settings."
    ),
    ErrorCategory.CONNECTION_REFUSED: (
        "Failed to connect to the API because the connection was refused. "
        "Please check your network connection, proxy and firewall settings."
    ),
    ErrorCategory.CONNECTION_RESET: (
        "The connection to the API was reset before a response arrived. "
        "Please check your network connection and try again."
    ),
    ErrorCategory.TLS_HANDSHAKE_FAILURE: (
        "Failed to connect to the API because the TLS connection failed. " + _TLS_HELP
    ),
    ErrorCategory.TIMEOUT: (
        "Request timed out after {timeout}. Try increasing the timeout with "
        "--timeout <milliseconds> or check the API status at https://status.openai.com."
    ),
    ErrorCategory.MALFORMED_RESPONSE: (
        "The API returned a response that could not be understood. "
        "Check that the host points at an OpenAI-compatible chat completions API."
    ),
    ErrorCategory.UNKNOWN: (
        "The API request failed unexpectedly{status_note}. "
        "Check your configuration and try again."
    ),
}

_DNS_MARKERS = ("ENOTFOUND", "getaddrinfo", "Name or service not known", "nodename nor servname")
_REFUSED_MARKERS = ("ECONNREFUSED", "Connection refused")
_RESET_MARKERS = ("ECONNRESET", "Connection reset")
_TLS_MARKERS = ("socket disconnected", "TLS", "SSL")
_TIMEOUT_MARKERS = ("ETIMEDOUT", "timed out", "timeout")

_ERRNO_CATEGORIES = {
    errno.ECONNREFUSED: ErrorCategory.CONNECTION_REFUSED,
    errno.ECONNRESET: ErrorCategory.CONNECTION_RESET,
    errno.ETIMEDOUT: ErrorCategory.TIMEOUT,
}


def classify_status(status: int) -> ErrorCategory | None:
    """Category for an HTTP status, or None for 2xx."""
    if 200 <= status < 300:
        return None
    if status == 401:
        return ErrorCategory.AUTH
    if status == 429:
        return ErrorCategory.RATE_LIMIT
    if 500 <= status < 600:
        return ErrorCategory.SERVER_ERROR
    return ErrorCategory.UNKNOWN


def _root_cause(exc: BaseException) -> BaseException:
    """Unwrap URLError to the socket/TLS error it carries."""
    while isinstance(exc, urllib.error.URLError) and isinstance(exc.reason, BaseException):
        exc = exc.reason
    return exc


def _classify_text(text: str) -> ErrorCategory | None:
    for markers, category in (
        (_DNS_MARKERS, ErrorCategory.DNS_FAILURE),
        (_REFUSED_MARKERS, ErrorCategory.CONNECTION_REFUSED),
        (_RESET_MARKERS, ErrorCategory.CONNECTION_RESET),
        (_TLS_MARKERS, ErrorCategory.TLS_HANDSHAKE_FAILURE),
        (_TIMEOUT_MARKERS, ErrorCategory.TIMEOUT),
    ):
        if any(marker in text for marker in markers):
            return category
    return None


def classify_exception(exc: BaseException) -> ErrorCategory | None:
    """
    Category for a raw transport failure.

    Returns None when the exception is not a transport failure at all,
    in which case the caller should re-raise it unchanged.
    """
    if not isinstance(exc, (OSError, http.client.HTTPException)):
        return None

    cause = _root_cause(exc)

    if isinstance(cause, socket.gaierror):
        return ErrorCategory.DNS_FAILURE
    if isinstance(cause, ConnectionRefusedError):
        return ErrorCategory.CONNECTION_REFUSED
    # RemoteDisconnected is a ConnectionResetError subclass
    if isinstance(cause, (ConnectionResetError, http.client.IncompleteRead)):
        return ErrorCategory.CONNECTION_RESET
    if isinstance(cause, ssl.SSLError):
        return ErrorCategory.TLS_HANDSHAKE_FAILURE
    if isinstance(cause, TimeoutError):
        return ErrorCategory.TIMEOUT

    code = getattr(cause, "errno", None)
    if code in _ERRNO_CATEGORIES:
        return _ERRNO_CATEGORIES[code]

    return _classify_text(str(cause)) or ErrorCategory.UNKNOWN


def api_error_detail(body: str) -> str:
    """Pull error.message out of an API error body, else a short raw excerpt."""
    try:
        data = json.loads(body)
        message = data["error"]["message"]
        if isinstance(message, str) and message:
            return message
    except (ValueError, TypeError, KeyError):
        pass
    return body.strip()[:200]


def format_error(
    category: ErrorCategory,
    detail: str = "",
    timeout_ms: int | None = None,
    status: int | None = None,
) -> str:
    """Render the user-facing message for a category, with the raw detail appended."""
    message = ERROR_TEMPLATES[category].format(
        timeout=f"{timeout_ms}ms" if timeout_ms is not None else "the configured limit",
        status=status if status is not None else "5xx",
        status_note=f" (HTTP {status})" if status is not None else "",
    )
    if detail:
        message += f"\n\nDetails: {detail}"
    return message
