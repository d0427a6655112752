"""Command-line entry point: generate graphs from collectd data."""

import argparse
import sys
from typing import Optional

from .config import GraphConfig
from .env import get_config
from .errors import CggError, ConfigError
from .palette import palette_size
from .plugins import PLUGIN_NAMES, build_plugins, split_list
from .memory import MemoryType
from .rrd import run_graphs
from .timespan import parse_timespan
from . import log

EXAMPLES = """examples:
  cgg -i /var/lib/collectd/myhost/ -t "last 4 hours"
  cgg --input me@localhost:/var/lib/collectd/myhost/ -t "last 10 days" \\
      -w 2048 -h 1024 -o processes.png
  cgg -i me@192.168.0.163:/var/lib/collectd/myhost/ -t "last 1 hour" \\
      --processes "firefox,spotify,visual studio code"
  cgg -i /var/lib/collectd/myhost/ --start 1700000000 --end 1700003600 \\
      -p memory --memory "used,cached,free"
"""


def build_parser() -> argparse.ArgumentParser:
    cfg = get_config()
    parser = argparse.ArgumentParser(
        prog="cgg",
        description="Generates graphs from collectd data",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument(
        "-i", "--input", required=True,
        help="Path to the directory with collectd output, or user@host:path",
    )
    parser.add_argument(
        "-o", "--out", default=str(cfg.default_out),
        help="Output filename (default: %(default)s)",
    )
    parser.add_argument(
        "-w", "--width", type=int, default=cfg.default_width,
        help="Width of the output image (default: %(default)s)",
    )
    parser.add_argument(
        "-h", "--height", type=int, default=cfg.default_height,
        help="Height of the output image (default: %(default)s)",
    )
    parser.add_argument(
        "-t", "--timespan",
        help='Descriptive timespan of data range, e.g. "last 2 hours", "last 10 days"',
    )
    parser.add_argument("--start", type=int, help="Start timestamp (requires --end)")
    parser.add_argument("--end", type=int, help="End timestamp (requires --start)")
    parser.add_argument(
        "-p", "--plugins", default="processes",
        help=f"Comma-separated plugins to draw: {', '.join(PLUGIN_NAMES)} (default: %(default)s)",
    )
    parser.add_argument(
        "--processes",
        help="Comma-separated process names to draw (exact names, default: all)",
    )
    parser.add_argument(
        "-m", "--max-processes", "--max_processes", dest="max_processes", type=int,
        help=f"Maximum processes on one image (up to {palette_size()}); more are "
             f"split into numbered files, e.g. out_1.png, out_2.png",
    )
    parser.add_argument(
        "--memory", default="free",
        help=f"Comma-separated memory types: {', '.join(t.value for t in MemoryType)} "
             f"(default: %(default)s)",
    )
    return parser


def resolve_time_range(args: argparse.Namespace) -> tuple[int, int]:
    """Pick the time range from --timespan or --start/--end."""
    if args.timespan is not None:
        if args.start is not None or args.end is not None:
            raise ConfigError("--timespan cannot be combined with --start/--end")
        return parse_timespan(args.timespan)

    if args.start is None and args.end is None:
        raise ConfigError("Either --timespan or --start and --end is required")
    if args.start is None or args.end is None:
        raise ConfigError("--start and --end must be given together")
    return args.start, args.end


def config_from_args(args: argparse.Namespace) -> GraphConfig:
    """
    Build the run configuration from parsed arguments.

    Raises:
        ConfigError: on invalid values
    """
    start, end = resolve_time_range(args)
    processes = split_list(args.processes) if args.processes is not None else None

    plugins = build_plugins(
        split_list(args.plugins),
        processes=processes,
        max_processes=args.max_processes,
        memory=split_list(args.memory),
    )

    return GraphConfig(
        input=args.input,
        output=args.out,
        width=args.width,
        height=args.height,
        start=start,
        end=end,
        plugins=tuple(plugins),
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Run cgg and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
        saved = run_graphs(config)
    except CggError as e:
        log.error(str(e))
        result = getattr(e, "result", None)
        if result is not None:
            log.error(f"command: {result.command_line}")
        return 1

    log.info(f"Generated {len(saved)} image(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
