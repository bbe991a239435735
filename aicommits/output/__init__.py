"""Terminal Output Formatting Package

Commit messages go to stdout; errors, warnings and the verbose attempt log go
to stderr. Colour is decided per stream, so `aicommits 2>log` still colours
the messages and `aicommits | git commit -F -` still colours the diagnostics.
"""

import os
import re
import sys

from aicommits import CONVENTIONAL_TYPES

RESET = '\033[0m'
BOLD = '\033[1m'
DIM = '\033[2m'
RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
MAGENTA = '\033[35m'
CYAN = '\033[36m'

# Prefix colour per conventional type, grouped by what the change does
_TYPE_GROUPS = {
    GREEN: ('feat', 'perf'),
    RED: ('fix', 'revert'),
    YELLOW: ('refactor',),
    CYAN: ('docs', 'ci', 'build'),
    MAGENTA: ('test',),
    DIM: ('chore', 'style'),
}
_TYPE_COLORS = {name: color for color, names in _TYPE_GROUPS.items() for name in names}

_CONVENTIONAL_PREFIX = re.compile(r'^(\w+)(\([^)]*\))?(!?:)')


def _enable_windows_ansi() -> bool:
    try:
        import ctypes
        kernel32 = ctypes.windll.kernel32
        kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
        return True
    except (AttributeError, OSError):
        return False


def _wants_color(stream) -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not getattr(stream, 'isatty', None) or not stream.isatty():
        return False
    return sys.platform != 'win32' or _enable_windows_ansi()


def _can_encode(stream, text: str) -> bool:
    try:
        text.encode(getattr(stream, 'encoding', None) or 'utf-8')
        return True
    except (UnicodeEncodeError, LookupError):
        return False


def _paint(text: str, stream, *codes: str) -> str:
    if not _wants_color(stream):
        return text
    return f"{''.join(codes)}{text}{RESET}"


def _mark(stream, symbol: str, fallback: str) -> str:
    return symbol if _can_encode(stream, symbol) else fallback


def info(text: str) -> str:
    return _paint(text, sys.stdout, CYAN)


def bold(text: str) -> str:
    return _paint(text, sys.stdout, BOLD)


def colorize_commit_type(message: str) -> str:
    """Colour a recognised conventional prefix such as `fix(api):`; leave other text alone."""
    match = _CONVENTIONAL_PREFIX.match(message)
    if not match or match.group(1) not in CONVENTIONAL_TYPES:
        return message
    prefix = match.group(0)
    color = _TYPE_COLORS.get(match.group(1), BOLD)
    return _paint(prefix, sys.stdout, BOLD, color) + message[len(prefix):]


def print_error(message: str) -> None:
    stream = sys.stderr
    mark = _mark(stream, '✗', '[X]')
    print(_paint(f"{mark} {message}", stream, RED), file=stream)


def print_warning(message: str) -> None:
    stream = sys.stderr
    mark = _mark(stream, '⚠', '[!]')
    print(_paint(f"{mark} {message}", stream, YELLOW), file=stream)


def print_debug(message: str) -> None:
    print(_paint(message, sys.stderr, DIM), file=sys.stderr)


__all__ = [
    "bold",
    "colorize_commit_type",
    "info",
    "print_debug",
    "print_error",
    "print_warning",
]
