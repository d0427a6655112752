"""Error types raised while resolving, compiling and executing graph commands.

Every error carries an ordered list of operations it passed through on its way
to the caller (which plugin, which output slot, which remote step). Callers add
to it with ``add_context`` and re-raise, so the final message reads outermost
first, e.g. ``slot 2: remote copy: scp exited with status 1``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .shell import CommandResult


class CggError(Exception):
    """Base class for all errors surfaced to the command-line caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, operation: str) -> "CggError":
        """Record an enclosing operation and return self for re-raising."""
        self.context.insert(0, operation)
        return self

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return ": ".join(self.context + [self.message])


class MalformedLocator(CggError):
    """Input locator string could not be interpreted."""


class ConfigError(CggError):
    """Run configuration is invalid (bad timespan, unknown plugin, ...)."""


class NoMatchingMetrics(CggError):
    """A plugin found nothing to draw."""


class MissingDataFile(CggError):
    """An expected RRD file or input directory does not exist.

    When the absence was detected by a remote command, its captured result is
    kept in ``result``.
    """

    def __init__(self, message: str, result: Optional[CommandResult] = None):
        super().__init__(message)
        self.result = result


class TooManySeries(CggError):
    """More series were requested than the palette has distinct colors."""


class CommandFailed(CggError):
    """An external command exited non-zero or could not be started."""

    def __init__(self, message: str, result: Optional[CommandResult] = None):
        super().__init__(message)
        self.result = result


class RenderFailed(CommandFailed):
    """rrdtool (local or over ssh) failed to render an image."""


class RemoteCopyFailed(CommandFailed):
    """Copying the rendered image back from the remote host failed."""


class RemoteListFailed(CommandFailed):
    """Listing a directory on the remote host failed."""
