"""OpenAI Chat Completions Client"""

import os
import time
from typing import Callable

from aicommits.llm.base import Attempt, LLMError, Transport
from aicommits.llm.request import DEFAULT_HOST, build_request, build_request_body
from aicommits.llm.response import extract_messages
from aicommits.llm.retry import RetryOrchestrator
from aicommits.llm.transport import UrllibTransport
from aicommits.prompts import generate_prompt


class OpenAIClient:
    """Chat completions client. Requires an API key (OPENAI_KEY env var or config)."""

    DEFAULT_MODEL = "gpt-3.5-turbo"
    DEFAULT_TIMEOUT_MS = 10000

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout_ms: int | None = None,
        proxy: str | None = None,
        retries: int | None = None,
        insecure_tls: bool = False,
        host: str | None = None,
        transport: Transport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        on_retry: Callable[[Attempt, int], None] | None = None,
    ):
        self.api_key = api_key or os.environ.get("OPENAI_KEY") or os.environ.get("OPENAI_API_KEY")
        self.model = model or self.DEFAULT_MODEL
        self.timeout_ms = self.DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms
        self.proxy = proxy
        self.retries = retries
        self.insecure_tls = insecure_tls
        self.host = host or DEFAULT_HOST
        self.transport = transport or UrllibTransport()
        self._sleep = sleep
        self._on_retry = on_retry
        self.last_attempts: list[Attempt] = []

        if not self.api_key:
            raise LLMError(
                "No API key found. Set the OPENAI_KEY environment variable:\n"
                "  export OPENAI_KEY='your-key-here'"
            )

    @property
    def name(self) -> str:
        return f"OpenAI ({self.model})"

    def generate(
        self,
        diff: str,
        locale: str = "en",
        completions: int = 1,
        max_length: int = 50,
        commit_type: str = "",
    ) -> list[str]:
        """Candidate commit messages for a diff. Raises ClientError on terminal failure."""
        body = build_request_body(
            model=self.model,
            system_prompt=generate_prompt(locale, max_length, commit_type),
            diff=diff,
            completions=completions,
        )
        request = build_request(
            api_key=self.api_key,
            body=body,
            timeout_ms=self.timeout_ms,
            proxy_url=self.proxy,
            insecure_tls=self.insecure_tls,
            max_retries=self.retries,
            host=self.host,
        )
        orchestrator = RetryOrchestrator(
            self.transport,
            request,
            sleep=self._sleep,
            on_retry=self._on_retry,
        )
        try:
            choices = orchestrator.run()
        finally:
            self.last_attempts = orchestrator.attempts
        return extract_messages(choices)


def generate_commit_messages(
    api_key: str,
    model: str,
    locale: str,
    diff: str,
    completions: int,
    max_length: int,
    commit_type: str,
    timeout: int,
    proxy: str | None = None,
    retries: int | None = None,
    insecure_tls: bool = False,
    *,
    transport: Transport | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> list[str]:
    """One-shot entry point. `timeout` is in milliseconds."""
    client = OpenAIClient(
        api_key=api_key,
        model=model,
        timeout_ms=timeout,
        proxy=proxy,
        retries=retries,
        insecure_tls=insecure_tls,
        transport=transport,
        sleep=sleep,
    )
    return client.generate(
        diff,
        locale=locale,
        completions=completions,
        max_length=max_length,
        commit_type=commit_type,
    )
