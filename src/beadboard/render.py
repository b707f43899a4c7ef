"""Rich markup rendering for list items, the detail pane and the header."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from rich.color import Color, ColorParseError
from rich.markup import escape

from beadboard.layout import max_title_len
from beadboard.models import Issue, StatusGroups
from beadboard.tree import FEATURE_GLYPH, TreeNode, build_forest

ROW_LABELS = ("Open / Blocked", "In Progress", "Done (last 10)")
EMPTY_ROW = "(empty)"
MIN_AVAILABLE = 8
ELLIPSIS = "..."
DETAIL_PLACEHOLDER = "Navigate to an issue to see its details."
DETAIL_RULE = "─" * 21


@dataclass(frozen=True)
class PriorityStyle:
    """Badge label and color for one priority level."""

    label: str
    color: str


def build_priority_styles(entries: Mapping[int, tuple[str, str]]) -> dict[int, PriorityStyle]:
    """Validate and build the priority style table.

    Args:
        entries: Mapping of priority to (label, color)

    Returns:
        Mapping of priority to PriorityStyle

    Raises:
        ValueError: If the table does not cover exactly priorities 0-4, or a
            label is empty, or a color is not a valid Rich color.
    """
    if set(entries) != set(range(5)):
        raise ValueError(f"priority styles must cover 0-4, got {sorted(entries)}")

    styles: dict[int, PriorityStyle] = {}
    for priority, (label, color) in sorted(entries.items()):
        if not label:
            raise ValueError(f"priority {priority} has an empty label")
        try:
            Color.parse(color)
        except ColorParseError as e:
            raise ValueError(f"priority {priority} has invalid color {color!r}: {e}") from e
        styles[priority] = PriorityStyle(label=label, color=color)
    return styles


PRIORITY_STYLES = build_priority_styles({
    0: ("P0", "red"),
    1: ("P1", "yellow"),
    2: ("P2", "white"),
    3: ("P3", "bright_black"),
    4: ("P4", "bright_black"),
})


def priority_style(priority: int) -> PriorityStyle:
    """Look up the style for a priority, falling back to white for unknown values."""
    style = PRIORITY_STYLES.get(priority)
    if style is None:
        return PriorityStyle(label=f"P{priority}", color="white")
    return style


def truncate_title(title: str, available: int) -> str:
    """Cut a title to `available` characters, ending in an ellipsis if shortened."""
    available = max(MIN_AVAILABLE, available)
    if len(title) <= available:
        return title
    return title[: available - len(ELLIPSIS)] + ELLIPSIS


def format_list_item(node: TreeNode, width_budget: int) -> str:
    """Render a tree node as one markup line.

    Layout: {prefix}[priority][type][BLK] {id} {title}

    Args:
        node: The tree node to render
        width_budget: Title budget before the tree prefix is subtracted

    Returns:
        Rich markup string
    """
    issue = node.issue
    pri = priority_style(issue.priority)
    title = truncate_title(issue.title, width_budget - len(node.prefix))

    parts = [
        escape(node.prefix),
        f"[{pri.color}]{escape(f'[{pri.label}]')}[/{pri.color}]",
        f"[cyan]{escape(f'[{issue.type}]')}[/cyan]",
    ]
    if issue.blocked:
        parts.append(f"[red]{escape('[BLK]')}[/red]")
    parts.append(f" [dim]{escape(issue.id)}[/dim] {escape(title)}")
    return "".join(parts)


def format_detail(issue: Issue | None) -> str:
    """Render the detail pane for the selected issue, or a placeholder."""
    if issue is None:
        return f"[dim]  {DETAIL_PLACEHOLDER}[/dim]"

    pri = priority_style(issue.priority)
    state = "[red]blocked[/red]" if issue.blocked else "[green]ready[/green]"
    meta = "  ".join([
        f"[bold]{escape(issue.id)}[/bold]",
        f"[{pri.color}]{escape(pri.label)}[/{pri.color}]",
        f"[cyan]{escape(issue.type)}[/cyan]",
        f"owner: {escape(issue.owner or '—')}",
        state,
    ])
    description = escape(issue.description) if issue.description else "[dim](no description)[/dim]"

    return "\n".join([
        f"  {meta}",
        f"  [bold]{escape(issue.title)}[/bold]",
        f"  [dim]{DETAIL_RULE}[/dim]",
        f"  {description}",
    ])


def format_row_items(forest: list[TreeNode], width_budget: int) -> list[str]:
    """Render a whole forest, or the empty placeholder when it has no nodes."""
    if not forest:
        return [f"[dim]  {EMPTY_ROW}[/dim]"]
    return [format_list_item(node, width_budget) for node in forest]


def format_header(now: datetime, interval: float) -> str:
    """Render the one-line dashboard header with clock and key hints."""
    clock = now.strftime("%H:%M:%S")
    return (
        f"  [bold]Beads Board[/bold]  |  {clock}  |  [dim]every {interval:g}s[/dim]  |  "
        f"[dim]q:quit  r:refresh  ←→:switch col  tab:switch row  ↑↓:navigate[/dim]  "
        f"[yellow]{FEATURE_GLYPH.strip()}[/yellow][dim]=feature[/dim]"
    )


def render_groups_text(groups: StatusGroups, screen_width: int) -> str:
    """Render all three groups as labelled sections for one-shot output."""
    width_budget = max_title_len(screen_width)
    sections = []
    for label, issues in zip(ROW_LABELS, groups.rows()):
        lines = [f"[bold]{escape(label)}[/bold]"]
        lines.extend(format_row_items(build_forest(issues), width_budget))
        sections.append("\n".join(lines))
    return "\n\n".join(sections)
