"""
ANSI color codes and logging helpers for kcm.

Status lines go to stderr so that stdout stays clean for piping
(e.g. ``kcm current``). Color is dropped when NO_COLOR is set or
stderr is not a terminal.
"""

import os
import sys
from typing import Iterable


class Colors:
    """ANSI color escape codes for terminal output."""
    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[1;33m"
    CYAN = "\033[0;36m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    NC = "\033[0m"  # No Color / Reset


def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


def _emit(color: str, tag: str, msg: str) -> None:
    if _use_color():
        print(f"{color}{tag}{Colors.NC} {msg}", file=sys.stderr)
    else:
        print(f"{tag} {msg}", file=sys.stderr)


def log(msg: str) -> None:
    """Log a success message in green."""
    _emit(Colors.GREEN, "[+]", msg)


def warn(msg: str) -> None:
    """Log a warning message in yellow."""
    _emit(Colors.YELLOW, "[!]", msg)


def error(msg: str) -> None:
    """Log an error message in red."""
    _emit(Colors.RED, "[ERROR]", msg)


def info(msg: str) -> None:
    """Log an informational message in cyan."""
    _emit(Colors.CYAN, "[i]", msg)


def log_messages(messages: Iterable[str]) -> None:
    """Print engine messages, indented under the last status line."""
    for line in messages:
        print(f"  {line}" if line else "", file=sys.stderr)
