"""Shared pytest fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest

from beadboard.config import Config
from beadboard.models import Issue, IssueStatus


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    """Build an Issue with sensible defaults for the fields a test ignores."""

    def _make(
        id: str,
        blocked_by: tuple[str, ...] = (),
        type: str = "task",
        status: IssueStatus = IssueStatus.OPEN,
        **kwargs: object,
    ) -> Issue:
        fields: dict[str, object] = {
            "title": f"Issue {id}",
            "priority": 2,
            "blocked": bool(blocked_by),
        }
        fields.update(kwargs)
        return Issue(id=id, status=status, type=type, blocked_by=blocked_by, **fields)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config that never touches a real bd or a real .beads directory."""
    return Config(bd_command="bd-test", interval=60.0, timeout=1.0, watch_dir=tmp_path / "missing")
