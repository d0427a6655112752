"""Memory plugin: system memory usage by category on a single image."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, Iterable

from .errors import ConfigError, MissingDataFile, NoMatchingMetrics
from .graph_args import GraphArguments
from .locator import Locator
from .palette import check_series_count, color_at
from . import log
from . import shell

MEMORY_DIR = "memory"
LINE_THICKNESS = 5


class MemoryType(Enum):
    """Memory categories collectd's memory plugin records."""

    BUFFERED = "buffered"
    CACHED = "cached"
    FREE = "free"
    SLAB_RECL = "slab_recl"
    SLAB_UNRECL = "slab_unrecl"
    USED = "used"

    @property
    def filename(self) -> str:
        """RRD filename, e.g. memory-slab_recl.rrd."""
        return f"memory-{self.value}.rrd"

    def __str__(self) -> str:
        return self.value


def parse_memory_types(values: Iterable[str]) -> tuple[MemoryType, ...]:
    """
    Convert category names (as given on the command line) to MemoryTypes.

    Raises:
        ConfigError: on an unknown category
    """
    types = []
    for value in values:
        try:
            types.append(MemoryType(value.strip()))
        except ValueError:
            valid = ", ".join(t.value for t in MemoryType)
            raise ConfigError(f"Unknown memory type '{value}'. Valid: {valid}") from None
    return tuple(types)


def missing_data_files(
    locator: Locator, memory_types: tuple[MemoryType, ...]
) -> list[str]:
    """Return the filenames of memory_types that have no RRD file."""
    memory_dir = locator.join(MEMORY_DIR)

    if locator.is_remote:
        try:
            present = set(shell.remote_ls(memory_dir, locator))
        except MissingDataFile:
            log.debug(f"Remote directory {memory_dir} is missing")
            present = set()
        return [t.filename for t in memory_types if t.filename not in present]

    return [t.filename for t in memory_types if not (Path(memory_dir) / t.filename).exists()]


@dataclass(frozen=True)
class MemoryPlugin:
    """Settings for the memory plugin.

    Attributes:
        memory_types: Categories to draw, in legend order
    """

    name: ClassVar[str] = "memory"

    memory_types: tuple[MemoryType, ...] = (MemoryType.FREE,)

    def populate(self, locator: Locator, graph_args: GraphArguments) -> list[str]:
        """
        Draw every requested category on one new image.

        All RRD files are checked before anything is added, so a missing
        file leaves graph_args untouched.

        Returns:
            Category names drawn

        Raises:
            NoMatchingMetrics: if no categories were requested
            MissingDataFile: if any category's RRD file is absent
        """
        log.debug("Memory plugin entry point")

        if not self.memory_types:
            raise NoMatchingMetrics("No memory types requested")
        check_series_count(len(self.memory_types), "memory types")

        missing = missing_data_files(locator, self.memory_types)
        if missing:
            raise MissingDataFile(
                f"Missing memory data in {locator.join(MEMORY_DIR)}: {', '.join(missing)}"
            )
        log.debug("All expected memory files exist")

        graph_args.new_graph()
        for i, memory_type in enumerate(self.memory_types):
            graph_args.push(
                memory_type.value,
                color_at(i),
                LINE_THICKNESS,
                locator.join(MEMORY_DIR, memory_type.filename),
            )

        return [t.value for t in self.memory_types]
