"""Live Textual dashboard for bd issues."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from rich.text import Text
from textual import events, on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.geometry import Size
from textual.message import Message
from textual.timer import Timer
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from beadboard.config import Config
from beadboard.layout import ROW_COUNT, Layout, compute_layout
from beadboard.models import Issue, StatusGroups
from beadboard.render import ROW_LABELS, format_detail, format_header, format_row_items
from beadboard.source import fetch_groups
from beadboard.state import (
    Column,
    DashboardState,
    focus_detail,
    focus_row,
    next_row,
    previous_row,
    select,
    selected_issue,
    with_groups,
)
from beadboard.watch import start_watching, stop_watching

logger = logging.getLogger(__name__)

WATCH_POLL_INTERVAL = 0.5


class IssueRow(OptionList):
    """One status group rendered as a scrollable list of tree lines."""

    DEFAULT_CSS = """
    IssueRow {
        border: round $secondary;
        border-title-color: $text;
        border-title-style: bold;
        &:focus {
            border: round $warning;
            border-title-color: $warning;
        }
    }
    """

    @dataclass
    class Focused(Message):
        """Posted when the row receives focus."""

        issue_row: "IssueRow"

        @property
        def control(self) -> "IssueRow":
            return self.issue_row

    def __init__(self, row: int, label: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.row = row
        self.border_title = f" {label} "

    def on_focus(self, event: events.Focus) -> None:
        self.post_message(self.Focused(self))

    def set_items(self, items: list[str], selected: int, selectable: bool = True) -> None:
        """Replace every line and restore the cursor to `selected`."""
        self.clear_options()
        self.add_options([Option(Text.from_markup(item), disabled=not selectable) for item in items])
        if selectable and items:
            self.highlighted = min(selected, len(items) - 1)


class IssueDetail(VerticalScroll, can_focus=True):
    """Detail pane showing the selected issue."""

    DEFAULT_CSS = """
    IssueDetail {
        border: round $success;
        border-title-color: $text;
        border-title-style: bold;
        padding: 0 1;
        &:focus {
            border: round $warning;
            border-title-color: $warning;
        }

        #detail-body {
            height: auto;
        }
    }
    """

    class Focused(Message):
        """Posted when the detail pane receives focus."""

    def compose(self) -> ComposeResult:
        yield Static(id="detail-body")

    def on_mount(self) -> None:
        self.border_title = " Detail "

    def on_focus(self, event: events.Focus) -> None:
        self.post_message(self.Focused())

    def show(self, issue: Issue | None) -> None:
        self.query_one("#detail-body", Static).update(Text.from_markup(format_detail(issue)))


class BeadBoardApp(App[None]):
    """Live dashboard of bd issues grouped by status."""

    TITLE = "Beads Board"

    CSS = """
    BeadBoardApp {
        background: $background;
    }

    #header {
        height: 1;
        background: $primary;
        color: $text;
    }

    #left-column {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=False),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        Binding("r", "refresh", "Refresh", show=False),
        Binding("tab", "next_row", "Next Row", show=False, priority=True),
        Binding("shift+tab", "previous_row", "Previous Row", show=False, priority=True),
        Binding("left", "focus_list", "List", show=False, priority=True),
        Binding("right", "focus_detail", "Detail", show=False, priority=True),
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
    ]

    _refresh_timer: Timer | None = None
    _watch_timer: Timer | None = None

    def __init__(
        self,
        config: Config | None = None,
        fetch: Callable[[Config], StatusGroups] | None = None,
    ) -> None:
        super().__init__()
        self._config = config or Config()
        self._fetch = fetch or fetch_groups
        self._state = DashboardState()
        self._refresh_event = threading.Event()
        self._watching: Any = None
        self._last_refresh: datetime | None = None

    @property
    def state(self) -> DashboardState:
        return self._state

    def compose(self) -> ComposeResult:
        yield Static(id="header")
        with Horizontal(id="main-container"):
            with Vertical(id="left-column"):
                for i, label in enumerate(ROW_LABELS):
                    yield IssueRow(i, label, id=f"row-{i}")
            yield IssueDetail(id="detail-pane")

    def on_mount(self) -> None:
        self._focus_widgets()
        self._render_state()
        self._load()
        self._refresh_timer = self.set_interval(self._config.interval, self._load)
        self._watching = start_watching(self._config.watch_dir, self._refresh_event)
        self._watch_timer = self.set_interval(WATCH_POLL_INTERVAL, self._check_watch)

    def on_unmount(self) -> None:
        stop_watching(self._watching)
        self._watching = None
        for timer in (self._refresh_timer, self._watch_timer):
            if timer:
                timer.stop()

    def _check_watch(self) -> None:
        if self._refresh_event.is_set():
            self._refresh_event.clear()
            logger.debug("Beads data changed on disk, refreshing")
            self._load()

    @work(exclusive=True)
    async def _load(self) -> None:
        groups = self._fetch(self._config)
        self._state = with_groups(self._state, groups)
        self._last_refresh = datetime.now()
        self._render_state()

    def _rows(self) -> list[IssueRow]:
        return [self.query_one(f"#row-{i}", IssueRow) for i in range(ROW_COUNT)]

    def _apply_layout(self, layout: Layout) -> None:
        self.query_one("#left-column", Vertical).styles.width = layout.left_width
        for row, geometry in zip(self._rows(), layout.rows):
            row.styles.width = layout.left_width
            row.styles.height = geometry.height
        detail = self.query_one("#detail-pane", IssueDetail)
        detail.styles.width = layout.detail_width
        detail.styles.height = layout.detail_height

    def _render_state(self, size: Size | None = None) -> None:
        size = size or self.size
        layout = compute_layout(size.width, size.height)
        self._apply_layout(layout)

        self.query_one("#header", Static).update(
            Text.from_markup(format_header(self._last_refresh or datetime.now(), self._config.interval))
        )
        for row, forest, selected in zip(self._rows(), self._state.forests, self._state.selections):
            row.set_items(
                format_row_items(list(forest), layout.title_len),
                selected,
                selectable=bool(forest),
            )
        self._update_detail()

    def _update_detail(self) -> None:
        self.query_one("#detail-pane", IssueDetail).show(selected_issue(self._state))

    def _focus_widgets(self) -> None:
        if self._state.focused_column == Column.DETAIL:
            self.query_one("#detail-pane", IssueDetail).focus()
        else:
            self._rows()[self._state.focused_row].focus()

    def _transition(self, state: DashboardState) -> None:
        self._state = state
        self._focus_widgets()
        self._update_detail()

    def on_resize(self, event: events.Resize) -> None:
        if self._refresh_timer is None:
            return
        self._render_state(event.size)

    @on(OptionList.OptionHighlighted)
    def on_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        event.stop()
        row = event.option_list
        if not isinstance(row, IssueRow) or event.option_index is None:
            return
        self._state = select(self._state, row.row, event.option_index)
        if row.row == self._state.focused_row:
            self._update_detail()

    @on(IssueRow.Focused)
    def on_row_focused(self, event: IssueRow.Focused) -> None:
        event.stop()
        if (event.issue_row.row, Column.LIST) != (self._state.focused_row, self._state.focused_column):
            self._transition(focus_row(self._state, event.issue_row.row))

    @on(IssueDetail.Focused)
    def on_detail_focused(self, event: IssueDetail.Focused) -> None:
        event.stop()
        if self._state.focused_column != Column.DETAIL:
            self._transition(focus_detail(self._state))

    def action_refresh(self) -> None:
        self._load()

    def action_next_row(self) -> None:
        self._transition(next_row(self._state))

    def action_previous_row(self) -> None:
        self._transition(previous_row(self._state))

    def action_focus_list(self) -> None:
        self._transition(focus_row(self._state, self._state.focused_row))

    def action_focus_detail(self) -> None:
        self._transition(focus_detail(self._state))

    def action_cursor_down(self) -> None:
        if self._state.focused_column == Column.LIST:
            self._rows()[self._state.focused_row].action_cursor_down()

    def action_cursor_up(self) -> None:
        if self._state.focused_column == Column.LIST:
            self._rows()[self._state.focused_row].action_cursor_up()


def run_tui(config: Config | None = None) -> None:
    """Run the dashboard until the user quits."""
    app = BeadBoardApp(config)
    app.run()
