"""Dependency forest construction for a single status group."""

from collections.abc import Sequence
from dataclasses import dataclass

from beadboard.models import Issue

FEATURE_GLYPH = "◆  "
ROOT_GLYPH = "   "
BRANCH = "├─ "
LAST_BRANCH = "└─ "
PIPE = "│  "
GAP = "   "


@dataclass(frozen=True)
class TreeNode:
    """An issue positioned in the forest with its display prefix."""

    issue: Issue
    prefix: str

    @property
    def is_root(self) -> bool:
        return self.prefix in (FEATURE_GLYPH, ROOT_GLYPH)


def children_of(issues: Sequence[Issue]) -> dict[str, list[Issue]]:
    """Map each blocker id to the in-set issues it blocks.

    Blockers outside the set and self-references are ignored. Features are
    never registered as children.
    Children are registered in input order.
    """
    ids = {issue.id for issue in issues}
    children: dict[str, list[Issue]] = {}
    for issue in issues:
        if issue.is_feature:
            continue
        for blocker_id in issue.blocked_by:
            if blocker_id == issue.id or blocker_id not in ids:
                continue
            kids = children.setdefault(blocker_id, [])
            if issue not in kids:
                kids.append(issue)
    return children


def find_roots(issues: Sequence[Issue], children: dict[str, list[Issue]]) -> list[Issue]:
    """Return features and issues without an in-set blocker, in input order."""
    has_parent = {kid.id for kids in children.values() for kid in kids}
    return [issue for issue in issues if issue.is_feature or issue.id not in has_parent]


def walk_forest(issues: Sequence[Issue]) -> tuple[list[TreeNode], frozenset[str]]:
    """Depth-first pre-order walk from every root.

    An issue with several in-set blockers is placed under the first one the
    walk reaches. Issues unreachable from any root are not in the result.

    Returns:
        The rooted nodes in display order and the set of visited issue ids.
    """
    children = children_of(issues)
    forest: list[TreeNode] = []
    visited: set[str] = set()

    for root in find_roots(issues, children):
        # (issue, continuation, is_last); a None continuation marks a root
        stack: list[tuple[Issue, str | None, bool]] = [(root, None, True)]
        while stack:
            issue, continuation, is_last = stack.pop()
            if issue.id in visited:
                continue
            visited.add(issue.id)

            if continuation is None:
                prefix = FEATURE_GLYPH if issue.is_feature else ROOT_GLYPH
                next_continuation = GAP
            else:
                prefix = continuation + (LAST_BRANCH if is_last else BRANCH)
                next_continuation = continuation + (GAP if is_last else PIPE)
            forest.append(TreeNode(issue=issue, prefix=prefix))

            kids = children.get(issue.id, [])
            for idx in reversed(range(len(kids))):
                stack.append((kids[idx], next_continuation, idx == len(kids) - 1))

    return forest, frozenset(visited)


def build_forest(issues: Sequence[Issue]) -> list[TreeNode]:
    """Order a status group for display as a dependency forest.

    Every input issue appears exactly once. Members of blocker cycles that no
    root reaches are appended last with an empty prefix.
    """
    forest, visited = walk_forest(issues)
    orphans = [TreeNode(issue=issue, prefix="") for issue in issues if issue.id not in visited]
    return forest + orphans
