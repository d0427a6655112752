"""Resolved settings for one graph generation run."""

from dataclasses import dataclass

from .errors import ConfigError
from .plugins import Plugin


@dataclass(frozen=True)
class GraphConfig:
    """Everything the graph engine needs, already parsed and validated.

    Attributes:
        input: Collectd output directory, a path or ``user@host:path``
        output: Output image filename (numbered when several images result)
        width: Image width in pixels
        height: Image height in pixels
        start: Start of the time range, epoch seconds
        end: End of the time range, epoch seconds
        plugins: Plugin settings, drawn in this order
    """

    input: str
    output: str
    width: int
    height: int
    start: int
    end: int
    plugins: tuple[Plugin, ...]

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(
                f"Image size must be positive, got {self.width}x{self.height}"
            )
        if self.start < 0 or self.end < 0:
            raise ConfigError("Start and end timestamps must not be negative")
        if self.start >= self.end:
            raise ConfigError(
                f"Start timestamp {self.start} must be before end timestamp {self.end}"
            )
        if not self.output:
            raise ConfigError("Output filename is empty")
        if not self.plugins:
            raise ConfigError("No plugins selected")
