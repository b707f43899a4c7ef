"""Dashboard state and the pure transitions applied to it.

The controller never mutates a state in place: every refresh, focus change
or cursor move produces a new `DashboardState`, which is then rendered.
"""

from dataclasses import dataclass, replace
from enum import Enum

from beadboard.layout import ROW_COUNT
from beadboard.models import Issue, StatusGroups
from beadboard.tree import TreeNode, build_forest


class Column(str, Enum):
    """Which side of the screen holds focus."""

    LIST = "list"
    DETAIL = "detail"


Forest = tuple[TreeNode, ...]


@dataclass(frozen=True)
class DashboardState:
    forests: tuple[Forest, ...] = ((),) * ROW_COUNT
    selections: tuple[int, ...] = (0,) * ROW_COUNT
    focused_row: int = 0
    focused_column: Column = Column.LIST


def _clamp(index: int, length: int) -> int:
    return max(0, min(index, length - 1))


def with_groups(state: DashboardState, groups: StatusGroups) -> DashboardState:
    """Rebuild every forest from fresh data, keeping selections in range."""
    forests = tuple(tuple(build_forest(issues)) for issues in groups.rows())
    selections = tuple(
        _clamp(selected, len(forest)) for selected, forest in zip(state.selections, forests)
    )
    return replace(state, forests=forests, selections=selections)


def focus_row(state: DashboardState, row: int) -> DashboardState:
    return replace(state, focused_row=row % ROW_COUNT, focused_column=Column.LIST)


def next_row(state: DashboardState) -> DashboardState:
    return focus_row(state, state.focused_row + 1)


def previous_row(state: DashboardState) -> DashboardState:
    return focus_row(state, state.focused_row - 1)


def focus_detail(state: DashboardState) -> DashboardState:
    return replace(state, focused_column=Column.DETAIL)


def select(state: DashboardState, row: int, index: int) -> DashboardState:
    """Move the cursor of `row` to `index`, clamped to the forest size."""
    selections = list(state.selections)
    selections[row] = _clamp(index, len(state.forests[row]))
    return replace(state, selections=tuple(selections))


def selected_issue(state: DashboardState) -> Issue | None:
    """Return the issue under the cursor of the focused row, if any."""
    forest = state.forests[state.focused_row]
    if not forest:
        return None
    return forest[state.selections[state.focused_row]].issue
