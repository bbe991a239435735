"""Request Builder - Assemble the chat completions payload."""

from aicommits.llm.base import RequestConfig

DEFAULT_HOST = "api.openai.com"
COMPLETIONS_PATH = "/v1/chat/completions"
DEFAULT_MAX_RETRIES = 2

# Sampling parameters sent with every request
TEMPERATURE = 0.7
TOP_P = 1
FREQUENCY_PENALTY = 0
PRESENCE_PENALTY = 0
MAX_TOKENS = 200


def build_request_body(model: str, system_prompt: str, diff: str, completions: int) -> dict:
    """Chat completions body: system instructions, then the diff as the user turn."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": diff},
        ],
        "temperature": TEMPERATURE,
        "top_p": TOP_P,
        "frequency_penalty": FREQUENCY_PENALTY,
        "presence_penalty": PRESENCE_PENALTY,
        "max_tokens": MAX_TOKENS,
        "stream": False,
        "n": completions,
    }


def build_request(
    api_key: str,
    body: dict,
    timeout_ms: int,
    proxy_url: str | None = None,
    insecure_tls: bool = False,
    max_retries: int | None = None,
    host: str = DEFAULT_HOST,
) -> RequestConfig:
    """Wrap a payload with transport settings. max_retries=None uses the default of 2."""
    return RequestConfig(
        api_key=api_key,
        host=host or DEFAULT_HOST,
        path=COMPLETIONS_PATH,
        body=body,
        timeout_ms=timeout_ms,
        proxy_url=proxy_url or None,
        insecure_tls=insecure_tls,
        max_retries=DEFAULT_MAX_RETRIES if max_retries is None else max_retries,
    )
