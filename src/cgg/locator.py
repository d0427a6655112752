"""Resolve the input directory argument into a local or remote locator."""

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from .errors import MalformedLocator
from . import log


class Target(Enum):
    """Where the collectd data lives."""

    LOCAL = "local"
    REMOTE = "remote"


# user@host:path, user may not contain "/" so local paths with "@" stay local.
# Bracketed hosts allow IPv6 literals.
_REMOTE_RE = re.compile(
    r"^(?P<user>[^@/:]+)@(?P<host>\[[^\]]+\]|[^:/@]+):(?P<path>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class Locator:
    """Resolved location of the collectd output directory.

    Attributes:
        kind: LOCAL or REMOTE
        path: Directory path (on the remote host when kind is REMOTE)
        username: Remote login, only set for REMOTE
        hostname: Remote host, only set for REMOTE
    """

    kind: Target
    path: str
    username: Optional[str] = None
    hostname: Optional[str] = None

    def __post_init__(self):
        remote_fields = self.username is not None and self.hostname is not None
        if self.kind is Target.REMOTE and not remote_fields:
            raise MalformedLocator("remote locator requires username and hostname")
        if self.kind is Target.LOCAL and (
            self.username is not None or self.hostname is not None
        ):
            raise MalformedLocator("local locator cannot carry username or hostname")

    @property
    def is_remote(self) -> bool:
        return self.kind is Target.REMOTE

    @property
    def network_address(self) -> str:
        """Return ``user@host`` as scp expects it (IPv6 hosts keep brackets)."""
        if not self.is_remote:
            raise MalformedLocator(f"{self.path} is not a remote locator")
        return f"{self.username}@{self.hostname}"

    @property
    def ssh_address(self) -> str:
        """Return ``user@host`` as ssh expects it, IPv6 brackets removed."""
        if not self.is_remote:
            raise MalformedLocator(f"{self.path} is not a remote locator")
        host = self.hostname
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        return f"{self.username}@{host}"

    def join(self, *parts: str) -> str:
        """Join path parts onto the data directory using the target's path rules."""
        base = PurePosixPath(self.path) if self.is_remote else Path(self.path)
        return str(base.joinpath(*parts))

    def __str__(self) -> str:
        if self.is_remote:
            return f"{self.network_address}:{self.path}"
        return self.path


def parse_locator(raw: Union[str, bytes, "os.PathLike[str]"]) -> Locator:
    """
    Parse an input directory argument.

    ``user@host:path`` becomes a REMOTE locator with the three parts taken
    verbatim; anything else is a LOCAL path. Nothing is checked against DNS
    or the filesystem here.

    Args:
        raw: Path string, bytes or path-like object

    Returns:
        Locator

    Raises:
        MalformedLocator: if the value is empty, not valid UTF-8 text, or has
            an unbracketed IPv6 host
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedLocator(f"input locator is not valid UTF-8: {e}") from e
    else:
        try:
            text = os.fspath(raw)
        except TypeError as e:
            raise MalformedLocator(f"unsupported input locator type: {type(raw).__name__}") from e
        if isinstance(text, bytes):
            return parse_locator(text)

    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedLocator(f"input locator is not valid UTF-8: {e}") from e

    if not text:
        raise MalformedLocator("input locator is empty")

    match = _REMOTE_RE.match(text)
    if match is None:
        log.debug(f"Parsed local path: {text}")
        return Locator(kind=Target.LOCAL, path=text)

    # me@fe80::1:/data would otherwise split into host "fe80" and path ":1:/data"
    if match.group("path").startswith(":"):
        raise MalformedLocator(
            f"cannot tell host from path in '{text}', write IPv6 hosts in brackets: "
            f"user@[addr]:path"
        )

    locator = Locator(
        kind=Target.REMOTE,
        path=match.group("path"),
        username=match.group("user"),
        hostname=match.group("host"),
    )
    log.debug(
        f"Parsed remote path, username: {locator.username}, "
        f"hostname: {locator.hostname}, path: {locator.path}"
    )
    return locator
