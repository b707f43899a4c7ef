"""Responsive geometry for the three-row dashboard."""

from dataclasses import dataclass

LEFT_PCT = 60
ROW_COUNT = 3
HEADER_HEIGHT = 1
# priority badge + type badge + [BLK] + id + separator
FIXED_PREFIX = 4 + 8 + 5 + 12 + 1
LIST_CHROME = 4
MIN_TITLE_LEN = 10


def row_height(i: int, total_height: int) -> int:
    """Height of row `i` when `total_height` lines are shared by the rows.

    The last row absorbs the remainder so the heights always sum to
    `total_height`.
    """
    total_height = max(0, total_height)
    base = total_height // ROW_COUNT
    if i < ROW_COUNT - 1:
        return base
    return total_height - (ROW_COUNT - 1) * base


def row_top(i: int, total_height: int) -> int:
    """Screen line where row `i` starts, below the header."""
    return HEADER_HEIGHT + sum(row_height(j, total_height) for j in range(i))


def left_width(screen_width: int) -> int:
    return max(0, screen_width) * LEFT_PCT // 100


def max_title_len(screen_width: int) -> int:
    """Title budget for list items in a terminal `screen_width` columns wide."""
    return max(MIN_TITLE_LEN, left_width(screen_width) - LIST_CHROME - FIXED_PREFIX)


@dataclass(frozen=True)
class RowGeometry:
    top: int
    height: int


@dataclass(frozen=True)
class Layout:
    """Geometry snapshot for one terminal size."""

    width: int
    height: int
    rows: tuple[RowGeometry, ...]
    left_width: int
    detail_left: int
    detail_width: int
    detail_top: int
    detail_height: int
    title_len: int


def compute_layout(width: int, height: int) -> Layout:
    """Compute every widget position and size for a `width` x `height` screen."""
    body_height = max(0, height - HEADER_HEIGHT)
    left = left_width(width)
    rows = tuple(
        RowGeometry(top=row_top(i, body_height), height=row_height(i, body_height))
        for i in range(ROW_COUNT)
    )
    return Layout(
        width=width,
        height=height,
        rows=rows,
        left_width=left,
        detail_left=left,
        detail_width=max(0, width - left),
        detail_top=HEADER_HEIGHT,
        detail_height=body_height,
        title_len=max_title_len(width),
    )
