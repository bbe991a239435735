"""Transport Executor - One HTTPS POST per call, via urllib."""

import json
import ssl
import time
import urllib.error
import urllib.request
from typing import Callable

from aicommits.llm.base import RequestConfig, Transport, TransportResponse

READ_CHUNK_SIZE = 8192


def _ssl_context(insecure_tls: bool) -> ssl.SSLContext:
    """Fresh context per attempt so relaxed verification never outlives it."""
    context = ssl.create_default_context()
    if insecure_tls:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def _narrow_socket_timeout(response, seconds: float) -> None:
    """Cap the next blocking read at the remaining budget.

    urllib responses (and an HTTPError wrapping one) keep the socket at
    fp.raw._sock. Anything else is left alone.
    """
    target = response
    for _ in range(3):
        raw = getattr(target, "raw", None)
        sock = getattr(raw, "_sock", None)
        if sock is not None:
            sock.settimeout(seconds)
            return
        target = getattr(target, "fp", None)
        if target is None:
            return


class UrllibTransport(Transport):
    """
    Standard library transport.

    Proxy and TLS settings are handed to a per-attempt opener instead of
    process-wide state, so concurrent callers with different settings do
    not interfere. Non-2xx statuses come back as a TransportResponse;
    socket, TLS and timeout failures are raised unchanged for the
    classifier to inspect.

    timeout_ms bounds the whole attempt: connect, status line and body.
    A response still trickling in at the deadline raises TimeoutError.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock

    def _build_opener(self, request: RequestConfig) -> urllib.request.OpenerDirector:
        handlers = [urllib.request.HTTPSHandler(context=_ssl_context(request.insecure_tls))]
        if request.proxy_url:
            handlers.append(urllib.request.ProxyHandler({
                "http": request.proxy_url,
                "https": request.proxy_url,
            }))
        return urllib.request.build_opener(*handlers)

    def _read_body(self, response, deadline: float, timeout_ms: int) -> str:
        """Read in chunks, never past the attempt deadline.

        read1 does at most one socket read, so a trickling body cannot hold
        a single call open for longer than the remaining budget.
        """
        chunks = []
        while True:
            remaining = self._check_deadline(deadline, timeout_ms)
            _narrow_socket_timeout(response, remaining)
            chunk = response.read1(READ_CHUNK_SIZE)
            self._check_deadline(deadline, timeout_ms)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks).decode('utf-8', errors='replace')

    def _check_deadline(self, deadline: float, timeout_ms: int) -> float:
        remaining = deadline - self._clock()
        if remaining <= 0:
            raise TimeoutError(f"No full response within {timeout_ms}ms")
        return remaining

    def send(self, request: RequestConfig) -> TransportResponse:
        data = json.dumps(request.body).encode('utf-8')
        req = urllib.request.Request(
            request.url,
            data=data,
            method="POST",
            headers={
                "Authorization": f"Bearer {request.api_key}",
                "Content-Type": "application/json",
            },
        )
        opener = self._build_opener(request)
        deadline = self._clock() + request.timeout_ms / 1000

        try:
            with opener.open(req, timeout=request.timeout_ms / 1000) as response:
                return TransportResponse(
                    status=response.status,
                    body=self._read_body(response, deadline, request.timeout_ms),
                )
        except urllib.error.HTTPError as e:
            # HTTPError must come before URLError (it's a subclass)
            try:
                body = self._read_body(e, deadline, request.timeout_ms)
            finally:
                e.close()
            return TransportResponse(status=e.code, body=body)
