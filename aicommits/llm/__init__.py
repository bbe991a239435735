"""LLM Client Package"""

from aicommits.llm.base import (
    Attempt,
    ClientError,
    ErrorCategory,
    LLMError,
    RequestConfig,
    Transport,
    TransportResponse,
)
from aicommits.llm.errors import classify_exception, classify_status, format_error
from aicommits.llm.openai import OpenAIClient, generate_commit_messages
from aicommits.llm.request import build_request, build_request_body
from aicommits.llm.response import MalformedResponseError, process_response, sanitize_message
from aicommits.llm.retry import RetryOrchestrator, RetryState
from aicommits.llm.transport import UrllibTransport

__all__ = [
    "Attempt",
    "ClientError",
    "ErrorCategory",
    "LLMError",
    "RequestConfig",
    "Transport",
    "TransportResponse",
    "OpenAIClient",
    "generate_commit_messages",
    "build_request",
    "build_request_body",
    "classify_exception",
    "classify_status",
    "format_error",
    "MalformedResponseError",
    "process_response",
    "sanitize_message",
    "RetryOrchestrator",
    "RetryState",
    "UrllibTransport",
]
