"""Turn a descriptive timespan like "last 5 minutes" into epoch timestamps."""

import re
import time
from typing import Optional

from .errors import ConfigError

UNIT_SECONDS: dict[str, int] = {
    "sec": 1,
    "second": 1,
    "min": 60,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
}

_TIMESPAN_RE = re.compile(r"^\s*last\s+(?P<count>\d+)\s+(?P<unit>[a-z]+?)s?\s*$", re.IGNORECASE)


def parse_timespan(text: str, now: Optional[int] = None) -> tuple[int, int]:
    """
    Parse "last <N> <unit>" into a (start, end) epoch pair ending now.

    Args:
        text: e.g. "last 2 hours", "last 10 days", "last 1 week"
        now: End timestamp (default: current time)

    Returns:
        (start, end) in epoch seconds

    Raises:
        ConfigError: if the text is not understood or N is zero
    """
    match = _TIMESPAN_RE.match(text)
    if match is None:
        raise ConfigError(
            f"Cannot parse timespan '{text}', expected e.g. 'last 5 minutes'"
        )

    unit = match.group("unit").lower()
    if unit not in UNIT_SECONDS:
        valid = ", ".join(u for u in UNIT_SECONDS if len(u) > 3)
        raise ConfigError(f"Unknown time unit '{unit}' in '{text}'. Valid: {valid}")

    count = int(match.group("count"))
    if count == 0:
        raise ConfigError(f"Timespan '{text}' is empty")

    end = int(time.time()) if now is None else now
    return end - count * UNIT_SECONDS[unit], end
