"""Line colors for graph series.

Twenty visually distinct colors (Sasha Trubetskoy's list). The palette size is
also the hard limit on series per image: colors are never recycled because a
repeated color makes the legend ambiguous.
"""

from .errors import TooManySeries

COLORS: tuple[str, ...] = (
    "#e6194b",  # red
    "#3cb44b",  # green
    "#ffe119",  # yellow
    "#4363d8",  # blue
    "#f58231",  # orange
    "#911eb4",  # purple
    "#46f0f0",  # cyan
    "#f032e6",  # magenta
    "#bcf60c",  # lime
    "#fabebe",  # pink
    "#008080",  # teal
    "#e6beff",  # lavender
    "#9a6324",  # brown
    "#800000",  # maroon
    "#aaffc3",  # mint
    "#808000",  # olive
    "#ffd8b1",  # apricot
    "#000075",  # navy
    "#808080",  # grey
    "#000000",  # black
)


def palette_size() -> int:
    """Number of distinct colors, i.e. the maximum series per image."""
    return len(COLORS)


def color_at(index: int) -> str:
    """Return the color for the index-th series of an image."""
    if index < 0:
        raise IndexError(f"negative palette index: {index}")
    if index >= len(COLORS):
        raise TooManySeries(
            f"series #{index + 1} exceeds the palette of {len(COLORS)} colors"
        )
    return COLORS[index]


def check_series_count(count: int, what: str = "series") -> None:
    """
    Fail fast when a count of series cannot get distinct colors.

    Raises:
        TooManySeries: if count meets or exceeds the palette size
    """
    if count >= len(COLORS):
        raise TooManySeries(
            f"Too many {what} ({count}), only {len(COLORS) - 1} can be drawn "
            f"with distinct colors"
        )
