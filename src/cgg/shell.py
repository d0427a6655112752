"""Run external commands (rrdtool, ssh, scp) and capture their output."""

import shlex
import subprocess
from dataclasses import dataclass
from typing import Optional

from .env import get_config
from .errors import MissingDataFile, RemoteListFailed
from .locator import Locator
from . import log

# ssh reserves this exit status for its own failures (connection, auth).
SSH_FAILURE_STATUS = 255


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one external command.

    Attributes:
        args: Full argument list, executable first
        returncode: Exit status, or None if the command could not be started
        stdout: Captured standard output
        stderr: Captured standard error (the OS error text if not started)
    """

    args: tuple[str, ...]
    returncode: Optional[int]
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def status(self) -> str:
        if self.returncode is None:
            return "not started"
        return f"exit status: {self.returncode}"

    @property
    def command_line(self) -> str:
        return shlex.join(self.args)

    def log_output(self) -> None:
        """Log status, stdout and stderr at error level."""
        log.command_output(self.status, self.stdout, self.stderr)


def run_command(args: list[str]) -> CommandResult:
    """
    Run a command to completion and capture its output.

    Blocks until the process exits; there is no timeout. Launch failures
    (missing executable, permissions) are returned as a result with
    ``returncode=None`` instead of raised.
    """
    log.debug(f"Executing: {shlex.join(args)}")
    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        return CommandResult(tuple(args), None, "", str(e))

    return CommandResult(tuple(args), proc.returncode, proc.stdout, proc.stderr)


def _ssh_failed(result: CommandResult) -> bool:
    return result.returncode is None or result.returncode == SSH_FAILURE_STATUS


def remote_ls(directory: str, locator: Locator, directories: bool = False) -> list[str]:
    """
    List entries of a directory on the remote host via ``ssh ... ls -p``.

    Args:
        directory: Directory path on the remote host
        locator: Remote locator providing user and host
        directories: Return only subdirectories instead of only
            non-directory entries

    Returns:
        Entry names sorted by code point, the same order ``sorted`` gives
        for local listings regardless of the remote host's locale

    Raises:
        RemoteListFailed: if ssh itself fails
        MissingDataFile: if ls fails (directory missing or unreadable)
    """
    cfg = get_config()
    result = run_command(
        [cfg.ssh_command, locator.ssh_address, "ls", "-p", shlex.quote(directory)]
    )
    where = f"{locator.network_address}:{directory}"
    if _ssh_failed(result):
        raise RemoteListFailed(
            f"Failed to list remote directory {where} ({result.status})", result
        )
    if not result.ok:
        log.debug(f"ls failed on remote directory {where}: {result.stderr.rstrip()}")
        raise MissingDataFile(
            f"Failed to read remote directory {where} ({result.status})", result
        )

    entries = []
    for line in result.stdout.splitlines():
        is_dir = line.endswith("/")
        name = line.rstrip("/")
        if name and is_dir == directories:
            entries.append(name)
    entries.sort()

    log.debug(f"Listed {len(entries)} entries in remote directory {directory}")
    return entries


def remote_missing(paths: list[str], locator: Locator) -> list[str]:
    """
    Return the paths that do not exist on the remote host.

    Uses a single ``ls -d`` that prints the paths it finds and complains
    about the rest, so its non-zero exit is expected when files are missing.

    Raises:
        RemoteListFailed: if ssh itself fails
    """
    if not paths:
        return []

    cfg = get_config()
    result = run_command(
        [cfg.ssh_command, locator.ssh_address, "ls", "-d", "--",
         *(shlex.quote(p) for p in paths)]
    )
    if _ssh_failed(result):
        raise RemoteListFailed(
            f"Failed to check files on {locator.network_address} ({result.status})",
            result,
        )

    present = set(result.stdout.splitlines())
    return [p for p in paths if p not in present]
