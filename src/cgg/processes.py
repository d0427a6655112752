"""Processes plugin: resident set size of every process collectd watches.

collectd's processes plugin writes one directory per watched process,
``<input>/processes-<name>/ps_rss.rrd``. Each process becomes one line; when
there are more processes than fit on one image, they are split over several
images with colors restarting from the top of the palette on each.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

from .errors import ConfigError, MissingDataFile, NoMatchingMetrics
from .graph_args import GraphArguments
from .locator import Locator
from .palette import check_series_count, color_at, palette_size
from . import log
from . import shell

PROCESS_DIR_PREFIX = "processes-"
RSS_FILENAME = "ps_rss.rrd"
LINE_THICKNESS = 3


def _names_from_entries(entries: list[str]) -> list[str]:
    names = []
    for entry in entries:
        if entry.startswith(PROCESS_DIR_PREFIX):
            name = entry[len(PROCESS_DIR_PREFIX):]
            if name.strip():
                names.append(name)
    return names


def list_process_names(locator: Locator) -> list[str]:
    """
    Get names of the processes collectd has data for.

    Only directories count, and both local and remote listings are sorted by
    code point so chunking and colors match between the two.

    Raises:
        MissingDataFile: if the input directory cannot be read
        RemoteListFailed: if ssh fails
    """
    if locator.is_remote:
        return _names_from_entries(
            shell.remote_ls(locator.path, locator, directories=True)
        )

    input_dir = Path(locator.path)
    try:
        entries = sorted(p.name for p in input_dir.iterdir() if p.is_dir())
    except OSError as e:
        raise MissingDataFile(f"Failed to read directory {input_dir}: {e}") from e

    return _names_from_entries(entries)


def filter_processes(
    processes: list[str], processes_to_draw: Optional[tuple[str, ...]]
) -> list[str]:
    """Keep only processes named exactly in processes_to_draw (None keeps all)."""
    if processes_to_draw is None:
        return list(processes)
    wanted = set(processes_to_draw)
    return [p for p in processes if p in wanted]


def split_into_images(processes: list[str], max_per_image: int) -> list[list[str]]:
    """Cut the process list into consecutive chunks of at most max_per_image."""
    return [
        processes[i:i + max_per_image]
        for i in range(0, len(processes), max_per_image)
    ]


@dataclass(frozen=True)
class ProcessesPlugin:
    """Settings for the processes plugin.

    Attributes:
        processes_to_draw: Exact process names to keep, or None for all
        max_processes: Maximum lines per image
    """

    name: ClassVar[str] = "processes"

    processes_to_draw: Optional[tuple[str, ...]] = None
    max_processes: int = palette_size()

    def __post_init__(self):
        if not 1 <= self.max_processes <= palette_size():
            raise ConfigError(
                f"max processes must be between 1 and {palette_size()}, "
                f"got {self.max_processes}"
            )

    def rss_path(self, locator: Locator, process: str) -> str:
        return locator.join(f"{PROCESS_DIR_PREFIX}{process}", RSS_FILENAME)

    def missing_rss_files(self, locator: Locator, processes: list[str]) -> list[str]:
        """Return the RSS file paths of processes that have none."""
        paths = [self.rss_path(locator, p) for p in processes]
        if locator.is_remote:
            return shell.remote_missing(paths, locator)
        return [p for p in paths if not Path(p).exists()]

    def populate(self, locator: Locator, graph_args: GraphArguments) -> list[str]:
        """
        Add one RSS line per process, one new image per chunk.

        Returns:
            Names of the processes drawn, in drawing order

        Raises:
            NoMatchingMetrics: if no processes are found or none pass the filter
            TooManySeries: if the process count reaches the palette size
            MissingDataFile: if a process directory has no RSS file
        """
        log.debug("Processes plugin entry point")

        processes = list_process_names(locator)
        if not processes:
            raise NoMatchingMetrics(f"Couldn't find any processes in {locator}")
        log.debug(f"Found processes: {processes}")

        processes = filter_processes(processes, self.processes_to_draw)
        if not processes:
            raise NoMatchingMetrics(
                f"None of the requested processes {list(self.processes_to_draw or ())} "
                f"were found in {locator}"
            )
        log.debug(f"Processes after filtering: {processes}")

        check_series_count(len(processes), "processes")

        missing = self.missing_rss_files(locator, processes)
        if missing:
            raise MissingDataFile(f"Missing process data: {', '.join(missing)}")

        chunks = split_into_images(processes, self.max_processes)
        log.debug(f"{len(processes)} processes should be saved on {len(chunks)} graphs.")

        for chunk in chunks:
            graph_args.new_graph()
            for i, process in enumerate(chunk):
                graph_args.push(
                    process, color_at(i), LINE_THICKNESS, self.rss_path(locator, process)
                )

        return processes
