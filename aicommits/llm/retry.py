"""Retry Orchestrator - Drive transport attempts under exponential backoff."""

import http.client
import time
from enum import Enum
from typing import Callable

from aicommits.llm.base import Attempt, ClientError, ErrorCategory, RequestConfig, Transport
from aicommits.llm.errors import api_error_detail, classify_exception, classify_status, format_error
from aicommits.llm.response import MalformedResponseError, parse_choices


class RetryState(Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    NON_RETRYABLE = "non_retryable"


class RetryOrchestrator:
    """
    Runs one logical request: attempt, classify, maybe wait, repeat.

    Attempts are strictly sequential. Each one produces a typed Attempt
    that is appended to `attempts`; intermediate failures never raise.
    Only the terminal state does, as a ClientError. Exceptions that are
    not transport failures propagate unchanged from the first attempt
    that hits them.

    HTTP 429 is deliberately not retried: backing off and resending
    would add load against a provider-side throttle. Callers that want
    retry-on-429 must loop at a higher layer.
    """

    BASE_DELAY_MS = 1000
    MAX_DELAY_MS = 5000

    def __init__(
        self,
        transport: Transport,
        request: RequestConfig,
        sleep: Callable[[float], None] = time.sleep,
        on_retry: Callable[[Attempt, int], None] | None = None,
    ):
        self.transport = transport
        self.request = request
        self._sleep = sleep
        self._on_retry = on_retry
        self.attempts: list[Attempt] = []
        self.state = RetryState.IDLE

    @classmethod
    def backoff_delay_ms(cls, index: int) -> int:
        """Delay before attempt index+1."""
        return min(cls.BASE_DELAY_MS * 2 ** index, cls.MAX_DELAY_MS)

    def _attempt(self, index: int) -> Attempt:
        try:
            response = self.transport.send(self.request)
        except (OSError, http.client.HTTPException) as e:
            return Attempt(index=index, category=classify_exception(e), detail=str(e) or type(e).__name__)

        category = classify_status(response.status)
        if category is not None:
            return Attempt(
                index=index,
                status=response.status,
                category=category,
                detail=api_error_detail(response.body),
            )

        try:
            choices = parse_choices(response.body)
        except MalformedResponseError as e:
            return Attempt(
                index=index,
                status=response.status,
                category=ErrorCategory.MALFORMED_RESPONSE,
                detail=str(e),
            )
        return Attempt(index=index, status=response.status, choices=choices)

    def _terminal_error(self, attempt: Attempt) -> ClientError:
        message = format_error(
            attempt.category,
            attempt.detail,
            timeout_ms=self.request.timeout_ms,
            status=attempt.status,
        )
        if len(self.attempts) > 1:
            message += f"\n\nGave up after {len(self.attempts)} attempts."
        return ClientError(attempt.category, message, attempts=list(self.attempts))

    def run(self) -> list:
        """Return the `choices` of the first successful attempt, or raise ClientError."""
        max_retries = self.request.max_retries

        for index in range(max_retries + 1):
            self.state = RetryState.ATTEMPTING
            attempt = self._attempt(index)
            self.attempts.append(attempt)

            if attempt.succeeded:
                self.state = RetryState.SUCCEEDED
                return attempt.choices

            if not attempt.category.retryable:
                self.state = RetryState.NON_RETRYABLE
                raise self._terminal_error(attempt)

            if index == max_retries:
                self.state = RetryState.EXHAUSTED
                raise self._terminal_error(attempt)

            self.state = RetryState.RETRYING
            delay_ms = self.backoff_delay_ms(index)
            if self._on_retry:
                self._on_retry(attempt, delay_ms)
            self._sleep(delay_ms / 1000)

        # Should not reach here
        raise ClientError(ErrorCategory.UNKNOWN, format_error(ErrorCategory.UNKNOWN), attempts=list(self.attempts))
