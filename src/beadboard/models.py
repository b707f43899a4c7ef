"""Core data models for beadboard."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 2
CLOSED_LIMIT = 10
FEATURE_TYPE = "feature"


class IssueStatus(str, Enum):
    """Status of an issue as reported by bd."""

    OPEN = "open"
    BLOCKED = "blocked"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class Dependency(BaseModel):
    """A single blocker reference on a raw bd record."""

    model_config = ConfigDict(extra="ignore")

    depends_on_id: str


class RawIssue(BaseModel):
    """An issue record as emitted by `bd list --json`.

    Only `id` is required. Optional fields that are missing, null or of the
    wrong shape degrade to defaults instead of failing validation.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    status: str = IssueStatus.OPEN.value
    priority: int = DEFAULT_PRIORITY
    issue_type: str = ""
    owner: str = ""
    description: str = ""
    updated_at: str = ""
    dependency_count: int = 0
    dependencies: list[Dependency] | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _text_id(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("title", "status", "issue_type", "owner", "description", "updated_at", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _lenient_priority(cls, value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return DEFAULT_PRIORITY

    @field_validator("dependency_count", mode="before")
    @classmethod
    def _lenient_count(cls, value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @field_validator("dependencies", mode="before")
    @classmethod
    def _lenient_dependencies(cls, value: Any) -> list[Any] | None:
        if value is None:
            return None
        if not isinstance(value, list):
            return []
        return [
            {"depends_on_id": str(d["depends_on_id"])}
            for d in value
            if isinstance(d, Mapping) and d.get("depends_on_id")
        ]


@dataclass(frozen=True)
class Issue:
    """An issue normalized for display."""

    id: str
    title: str
    status: IssueStatus
    priority: int
    type: str
    owner: str = ""
    blocked: bool = False
    description: str = ""
    blocked_by: tuple[str, ...] = ()
    updated_at: str = ""

    @property
    def is_feature(self) -> bool:
        return self.type == FEATURE_TYPE


def _parse_status(value: str) -> IssueStatus:
    try:
        return IssueStatus(value)
    except ValueError:
        logger.debug(f"Unknown status {value!r}, treating as open")
        return IssueStatus.OPEN


def normalize(raw: RawIssue | Mapping[str, Any]) -> Issue:
    """Map a raw bd record to the display shape.

    `blocked` follows the dependency list whenever the record carries one,
    so the blocked badge and the tree shape agree. Only records without any
    dependency list fall back to `dependency_count`.

    Args:
        raw: A validated record, or a mapping to validate first

    Returns:
        The normalized issue

    Raises:
        pydantic.ValidationError: If a mapping has no usable `id`.
    """
    if not isinstance(raw, RawIssue):
        raw = RawIssue.model_validate(raw)

    if raw.dependencies is None:
        blocked_by: tuple[str, ...] = ()
        blocked = raw.dependency_count > 0
    else:
        blocked_by = tuple(d.depends_on_id for d in raw.dependencies)
        blocked = bool(blocked_by)

    return Issue(
        id=raw.id,
        title=raw.title,
        status=_parse_status(raw.status),
        priority=raw.priority,
        type=raw.issue_type,
        owner=raw.owner,
        blocked=blocked,
        description=raw.description,
        blocked_by=blocked_by,
        updated_at=raw.updated_at,
    )


@dataclass(frozen=True)
class StatusGroups:
    """Issues partitioned into the three dashboard rows."""

    open: list[Issue] = field(default_factory=list)
    in_progress: list[Issue] = field(default_factory=list)
    closed: list[Issue] = field(default_factory=list)

    def rows(self) -> tuple[list[Issue], list[Issue], list[Issue]]:
        """Return the groups in display order: open, in progress, closed."""
        return (self.open, self.in_progress, self.closed)


_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _updated_key(issue: Issue) -> datetime:
    """Parse `updated_at` for ranking; empty or unparsable values rank oldest."""
    try:
        parsed = datetime.fromisoformat(issue.updated_at)
    except ValueError:
        return _OLDEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _most_recent(issues: list[Issue], limit: int) -> list[Issue]:
    """Keep the `limit` most recently updated issues, in their input order."""
    if len(issues) <= limit:
        return issues
    ranked = sorted(range(len(issues)), key=lambda n: _updated_key(issues[n]), reverse=True)
    keep = sorted(ranked[:limit])
    return [issues[n] for n in keep]


def partition_by_status(issues: Iterable[Issue]) -> StatusGroups:
    """Split issues into open (open + blocked), in-progress and closed groups.

    Input order is preserved within each group. The closed group is capped to
    the CLOSED_LIMIT most recently updated issues; without timestamps the
    first ones win.
    """
    open_issues: list[Issue] = []
    in_progress: list[Issue] = []
    closed: list[Issue] = []

    for issue in issues:
        if issue.status == IssueStatus.IN_PROGRESS:
            in_progress.append(issue)
        elif issue.status == IssueStatus.CLOSED:
            closed.append(issue)
        else:
            open_issues.append(issue)

    return StatusGroups(
        open=open_issues,
        in_progress=in_progress,
        closed=_most_recent(closed, CLOSED_LIMIT),
    )
