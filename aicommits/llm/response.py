"""Response Post-Processor - Turn a completions body into clean candidate messages."""

import json
import re

_TRAILING_PERIOD = re.compile(r'(\w)\.$')
_NEWLINES = re.compile(r'[\n\r]')


class MalformedResponseError(ValueError):
    """Body is not JSON shaped like a chat completions response."""
    pass


def parse_choices(body: str) -> list:
    """Return the `choices` array of a completions body."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")

    choices = data.get("choices")
    if not isinstance(choices, list):
        raise MalformedResponseError("Response has no 'choices' array")
    return choices


def _choice_content(choice) -> str | None:
    if not isinstance(choice, dict):
        return None
    message = choice.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) and content else None


def sanitize_message(message: str) -> str:
    """Trim, drop newlines, and remove one trailing period that follows a word character."""
    message = _NEWLINES.sub('', message.strip())
    return _TRAILING_PERIOD.sub(r'\1', message)


def deduplicate_messages(messages: list[str]) -> list[str]:
    """Exact-match dedupe, first occurrence wins."""
    return list(dict.fromkeys(messages))


def extract_messages(choices: list) -> list[str]:
    """Sanitized, deduplicated contents. Choices without content are skipped."""
    sanitized = []
    for choice in choices:
        content = _choice_content(choice)
        if content is None:
            continue
        message = sanitize_message(content)
        if message:
            sanitized.append(message)
    return deduplicate_messages(sanitized)


def process_response(body: str) -> list[str]:
    """Parse and post-process a successful body. May return an empty list."""
    return extract_messages(parse_choices(body))
