"""Simple logging helper."""

import sys
from datetime import datetime
from typing import TextIO

from .env import get_config


def _ts() -> str:
    """Get current timestamp string."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def _emit(stream: TextIO, label: str, msg: str) -> None:
    prefix = f"{label}: " if label else ""
    print(f"[{_ts()}] {prefix}{msg}", file=stream)


def info(msg: str) -> None:
    """Print info message to stdout."""
    _emit(sys.stdout, "", msg)


def debug(msg: str) -> None:
    """Print debug message if CGG_DEBUG is enabled."""
    if get_config().cgg_debug:
        _emit(sys.stdout, "DEBUG", msg)


def error(msg: str) -> None:
    """Print error message to stderr."""
    _emit(sys.stderr, "ERROR", msg)


def warn(msg: str) -> None:
    """Print warning message to stderr."""
    _emit(sys.stderr, "WARN", msg)


def command_output(status: str, stdout: str, stderr: str) -> None:
    """Dump the captured status and output streams of a failed command."""
    error(f"status: {status}")
    error(f"stdout: {stdout.rstrip()}")
    error(f"stderr: {stderr.rstrip()}")
