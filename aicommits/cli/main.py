"""CLI Main Entry Point"""

import os
import sys
from pathlib import Path

from aicommits.config import Config, get_config_path, load_config
from aicommits.llm import Attempt, ClientError, LLMError, OpenAIClient
from aicommits.output import bold, colorize_commit_type, info, print_debug, print_error, print_warning

from aicommits.cli.args import parse_args


def _resolve_config(args, config: Config) -> Config:
    """Apply environment and CLI overrides.

    Precedence: CLI args > environment variables > config file
    """
    config.api_key = os.environ.get('OPENAI_KEY') or os.environ.get('OPENAI_API_KEY') or config.api_key
    config.model = os.environ.get('AICOMMITS_MODEL') or config.model
    config.proxy = os.environ.get('HTTPS_PROXY') or os.environ.get('https_proxy') or config.proxy

    overrides = {
        'model': args.model,
        'locale': args.locale,
        'generate': args.generate,
        'type': args.type,
        'max_length': args.max_length,
        'timeout': args.timeout,
        'proxy': args.proxy,
        'retries': args.retries,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    if args.insecure_tls:
        config.insecure_tls = True

    for message in config.validate():
        print_warning(message)
    return config


def _read_diff(args) -> str | None:
    """Diff text from --diff-file or piped stdin. None means an error was already reported."""
    if args.diff_file:
        try:
            return Path(args.diff_file).read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            print_error(f"Could not read diff file {args.diff_file}: {e}")
            return None
    if sys.stdin.isatty():
        return ""
    return sys.stdin.buffer.read().decode('utf-8', errors='replace')


def _report_retry(attempt: Attempt, delay_ms: int) -> None:
    print_debug(
        f"  attempt {attempt.index + 1} failed ({attempt.category.label}), "
        f"retrying in {delay_ms}ms"
    )


def _print_attempt_summary(attempts: list[Attempt]) -> None:
    for attempt in attempts:
        outcome = f"HTTP {attempt.status}" if attempt.succeeded else attempt.category.label
        print_debug(f"  attempt {attempt.index + 1}: {outcome}")


def _display_messages(messages: list[str]) -> None:
    """Plain lines when piped or single; numbered options otherwise."""
    if len(messages) == 1 or not sys.stdout.isatty():
        for message in messages:
            print(message)
        return

    print(bold(f"Generated {len(messages)} messages:"))
    for i, message in enumerate(messages, 1):
        print(f"{info(f'[{i}]')} {colorize_commit_type(message)}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    config = _resolve_config(args, load_config())

    diff = _read_diff(args)
    if diff is None:
        return 1
    if not diff.strip():
        print_error("No diff provided. Pipe one in, e.g.: git diff --staged | aicommits")
        return 1

    try:
        client = OpenAIClient(
            api_key=config.api_key,
            model=config.model,
            timeout_ms=config.timeout,
            proxy=config.proxy,
            retries=config.retries,
            insecure_tls=config.insecure_tls,
            host=config.host,
            on_retry=_report_retry if args.verbose else None,
        )
    except LLMError as e:
        print_error(str(e))
        return 1

    if args.verbose:
        print_debug(f"Using {client.name} at {client.host}, ~{len(diff) // 4} diff tokens")
        config_path = get_config_path()
        print_debug(f"Config: {config_path or 'defaults'}")

    try:
        messages = client.generate(
            diff,
            locale=config.locale,
            completions=config.generate,
            max_length=config.max_length,
            commit_type=config.type,
        )
    except ClientError as e:
        print_error(str(e))
        if args.verbose:
            _print_attempt_summary(e.attempts)
        return 1

    if args.verbose:
        _print_attempt_summary(client.last_attempts)

    if not messages:
        print_error("No commit messages were generated. Try again.")
        return 1

    _display_messages(messages)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
