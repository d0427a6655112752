"""Compile rrdtool graph commands and run them locally or over ssh."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import GraphConfig
from .env import get_config
from .errors import CggError, NoMatchingMetrics, RemoteCopyFailed, RenderFailed
from .graph_args import GraphArguments
from .locator import Locator, parse_locator
from .plugins import populate_all
from .shell import CommandResult, run_command
from . import log

GRAPH_SUBCOMMAND = "graph"


@dataclass(frozen=True)
class CompiledCommand:
    """One ``rrdtool graph`` invocation producing one image.

    Attributes:
        subcommand: rrdtool subcommand ("graph")
        output_target: File rrdtool writes; the scratch path on the remote
            host for remote runs
        final_output: Local path where the image ends up
        common_args: Size and time range flags shared by every image
        draw_args: DEF/LINE arguments of this image
    """

    subcommand: str
    output_target: str
    final_output: str
    common_args: tuple[str, ...]
    draw_args: tuple[str, ...]

    def rrdtool_args(self) -> list[str]:
        """Arguments following the rrdtool executable."""
        return [self.subcommand, self.output_target, *self.common_args, *self.draw_args]


def common_args(width: int, height: int, start: int, end: int) -> list[str]:
    return [
        "-w", str(width),
        "-h", str(height),
        "--start", str(start),
        "--end", str(end),
    ]


def output_filename(output: str, index: int, count: int) -> str:
    """
    Get the output filename for image ``index`` (0-based) of ``count``.

    A single image keeps the name as given. Otherwise ``_<index+1>`` goes
    right before the extension: out.png -> out_1.png, out_2.png, ...
    Names without an extension get the suffix appended.
    """
    if count == 1:
        return output

    head, tail = os.path.split(output)
    dot = tail.rfind(".")
    suffix = f"_{index + 1}"
    if dot == -1:
        numbered = tail + suffix
    else:
        numbered = tail[:dot] + suffix + tail[dot:]
    return os.path.join(head, numbered) if head else numbered


def compile_commands(
    graph_args: GraphArguments,
    locator: Locator,
    output: str,
    width: int,
    height: int,
    start: int,
    end: int,
    remote_scratch: Optional[str] = None,
) -> list[CompiledCommand]:
    """
    Build one rrdtool command per slot of graph_args.

    Args:
        graph_args: Populated graph arguments
        locator: Where the RRD files live
        output: Requested output filename
        width: Image width in pixels
        height: Image height in pixels
        start: Start epoch
        end: End epoch
        remote_scratch: Remote output path (default from CGG_REMOTE_SCRATCH)

    Returns:
        Commands in slot order
    """
    count = len(graph_args.slots)
    shared = tuple(common_args(width, height, start, end))
    if locator.is_remote and remote_scratch is None:
        remote_scratch = get_config().remote_scratch_path

    log.debug(f"Building arguments for {count} files.")

    commands = []
    for index, slot in enumerate(graph_args.slots):
        final_output = output_filename(output, index, count)
        target = remote_scratch if locator.is_remote else final_output
        commands.append(CompiledCommand(
            subcommand=GRAPH_SUBCOMMAND,
            output_target=target,
            final_output=final_output,
            common_args=shared,
            draw_args=tuple(slot.args()),
        ))
        log.debug(f"Built arguments for {final_output} (rrdtool writes {target})")

    return commands


def _ensure_parent_dir(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def _check(result: CommandResult, error_cls: type, what: str) -> None:
    if result.ok:
        return
    result.log_output()
    raise error_cls(f"{what} failed ({result.status}): {result.command_line}", result)


def execute_local(command: CompiledCommand) -> None:
    """
    Run rrdtool on this machine.

    Raises:
        RenderFailed: if rrdtool cannot be started or exits non-zero
    """
    cfg = get_config()
    try:
        _ensure_parent_dir(command.final_output)
    except OSError as e:
        raise RenderFailed(f"Cannot create directory for {command.final_output}: {e}") from e

    result = run_command([cfg.rrdtool_command, *command.rrdtool_args()])
    _check(result, RenderFailed, "Local rrdtool")


def execute_remote(command: CompiledCommand, locator: Locator) -> None:
    """
    Run rrdtool on the remote host, then copy the image back with scp.

    The scratch file on the remote host is left in place.

    Raises:
        RenderFailed: if the ssh/rrdtool step fails
        RemoteCopyFailed: if the scp step fails
    """
    cfg = get_config()
    address = locator.network_address

    result = run_command(
        [cfg.ssh_command, locator.ssh_address, cfg.rrdtool_command, *command.rrdtool_args()]
    )
    try:
        _check(result, RenderFailed, "Remote rrdtool")
    except CggError as e:
        raise e.add_context("remote render")

    try:
        _ensure_parent_dir(command.final_output)
    except OSError as e:
        raise RemoteCopyFailed(
            f"Cannot create directory for {command.final_output}: {e}"
        ).add_context("remote copy") from e

    result = run_command(
        [cfg.scp_command, f"{address}:{command.output_target}", command.final_output]
    )
    try:
        _check(result, RemoteCopyFailed, "Copying image back")
    except CggError as e:
        raise e.add_context("remote copy")


def execute(commands: list[CompiledCommand], locator: Locator) -> list[str]:
    """
    Run compiled commands one after another, stopping at the first failure.

    Images already written by earlier commands are left on disk.

    Returns:
        Local paths of the saved images

    Raises:
        RenderFailed, RemoteCopyFailed: tagged with the failing image number
    """
    where = "remotely" if locator.is_remote else "locally"
    log.info(f"Executing rrdtool {where}...")

    saved = []
    for index, command in enumerate(commands):
        try:
            if locator.is_remote:
                execute_remote(command, locator)
            else:
                execute_local(command)
        except CggError as e:
            raise e.add_context(f"image {index + 1} of {len(commands)}")

        log.info(f"Successfully saved {command.final_output}")
        saved.append(command.final_output)

    return saved


def run_graphs(config: GraphConfig) -> list[str]:
    """
    Generate all images for a run.

    Resolves the input locator, lets every plugin add its series, compiles
    one rrdtool command per image and executes them in order.

    Returns:
        Local paths of the saved images

    Raises:
        CggError: on any failure; nothing is retried
    """
    locator = parse_locator(config.input)
    graph_args = GraphArguments(locator.kind)

    populate_all(config.plugins, locator, graph_args)
    if not graph_args.slots:
        raise NoMatchingMetrics("Nothing to draw")

    commands = compile_commands(
        graph_args,
        locator,
        output=config.output,
        width=config.width,
        height=config.height,
        start=config.start,
        end=config.end,
    )
    return execute(commands, locator)
