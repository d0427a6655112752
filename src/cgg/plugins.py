"""The closed set of data-source plugins and their dispatch."""

from typing import Iterable, Optional, Union

from .errors import CggError, ConfigError
from .graph_args import GraphArguments
from .locator import Locator
from .memory import MemoryPlugin, parse_memory_types
from .processes import ProcessesPlugin
from .palette import palette_size
from . import log

Plugin = Union[ProcessesPlugin, MemoryPlugin]

PLUGIN_NAMES: tuple[str, ...] = (ProcessesPlugin.name, MemoryPlugin.name)


def split_list(value: Optional[str]) -> list[str]:
    """Split a comma-separated command-line value, dropping empty items."""
    if value is None:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_plugin_names(names: Iterable[str]) -> tuple[str, ...]:
    """
    Validate plugin names, keeping order and dropping repeats.

    Raises:
        ConfigError: on an unknown name or an empty list
    """
    result: list[str] = []
    for name in names:
        if name not in PLUGIN_NAMES:
            raise ConfigError(
                f"Unknown plugin '{name}'. Valid: {', '.join(PLUGIN_NAMES)}"
            )
        if name not in result:
            result.append(name)
    if not result:
        raise ConfigError("No plugins selected")
    return tuple(result)


def build_plugins(
    plugin_names: Iterable[str],
    processes: Optional[Iterable[str]] = None,
    max_processes: Optional[int] = None,
    memory: Iterable[str] = ("free",),
) -> list[Plugin]:
    """Create plugin settings in the order the plugins were selected."""
    plugins: list[Plugin] = []
    for name in parse_plugin_names(plugin_names):
        if name == ProcessesPlugin.name:
            plugins.append(ProcessesPlugin(
                processes_to_draw=tuple(processes) if processes is not None else None,
                max_processes=max_processes if max_processes is not None else palette_size(),
            ))
        else:
            plugins.append(MemoryPlugin(memory_types=parse_memory_types(memory)))
    return plugins


def populate_all(
    plugins: Iterable[Plugin], locator: Locator, graph_args: GraphArguments
) -> dict[str, list[str]]:
    """
    Run every plugin against the shared graph arguments, in order.

    Returns:
        Drawn metric names per plugin name

    Raises:
        CggError: from the first failing plugin, tagged with its name
    """
    drawn: dict[str, list[str]] = {}
    for plugin in plugins:
        try:
            drawn[plugin.name] = plugin.populate(locator, graph_args)
        except CggError as e:
            raise e.add_context(f"{plugin.name} plugin")
        log.debug(f"{plugin.name} plugin added {len(drawn[plugin.name])} series")
    return drawn
