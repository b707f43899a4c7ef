"""Tests for core data models."""

from collections.abc import Callable

import pytest
from pydantic import ValidationError

from beadboard.models import (
    CLOSED_LIMIT,
    DEFAULT_PRIORITY,
    Issue,
    IssueStatus,
    RawIssue,
    normalize,
    partition_by_status,
)


class TestIssueStatus:
    def test_values(self) -> None:
        assert IssueStatus.OPEN.value == "open"
        assert IssueStatus.BLOCKED.value == "blocked"
        assert IssueStatus.IN_PROGRESS.value == "in_progress"
        assert IssueStatus.CLOSED.value == "closed"


class TestNormalize:
    def test_extracts_display_fields(self) -> None:
        raw = {
            "id": "Appealo-abc",
            "title": "Do something important",
            "status": "open",
            "priority": 1,
            "issue_type": "task",
            "owner": "user@example.com",
            "dependency_count": 2,
            "dependent_count": 0,
        }
        issue = normalize(raw)
        assert issue.id == "Appealo-abc"
        assert issue.title == "Do something important"
        assert issue.status == IssueStatus.OPEN
        assert issue.priority == 1
        assert issue.type == "task"
        assert issue.owner == "user@example.com"
        # no dependency list: the count decides
        assert issue.blocked is True
        assert issue.blocked_by == ()

    def test_not_blocked_without_dependencies(self) -> None:
        raw = {
            "id": "Appealo-xyz",
            "title": "Free task",
            "status": "open",
            "priority": 2,
            "issue_type": "feature",
            "owner": "a@b.com",
            "dependency_count": 0,
            "dependent_count": 1,
        }
        issue = normalize(raw)
        assert issue.blocked is False
        assert issue.is_feature

    def test_blocked_by_follows_dependency_list(self) -> None:
        raw = {
            "id": "bd-3",
            "title": "Child",
            "status": "blocked",
            "priority": 0,
            "issue_type": "task",
            "dependency_count": 2,
            "dependencies": [{"depends_on_id": "bd-1"}, {"depends_on_id": "bd-2", "type": "blocks"}],
        }
        issue = normalize(raw)
        assert issue.blocked_by == ("bd-1", "bd-2")
        assert issue.blocked is True
        assert issue.status == IssueStatus.BLOCKED

    def test_empty_dependency_list_wins_over_stale_count(self) -> None:
        """A populated-but-empty dependency list means not blocked, whatever the count says."""
        raw = {"id": "bd-4", "dependency_count": 3, "dependencies": []}
        issue = normalize(raw)
        assert issue.blocked_by == ()
        assert issue.blocked is False

    def test_missing_optional_fields_default(self) -> None:
        issue = normalize({"id": "bd-5"})
        assert issue.title == ""
        assert issue.owner == ""
        assert issue.description == ""
        assert issue.type == ""
        assert issue.updated_at == ""
        assert issue.priority == DEFAULT_PRIORITY
        assert issue.status == IssueStatus.OPEN
        assert issue.blocked is False

    def test_null_and_malformed_fields_degrade(self) -> None:
        raw = {
            "id": "bd-6",
            "title": None,
            "owner": None,
            "description": None,
            "priority": "urgent",
            "dependency_count": "lots",
            "dependencies": [{"depends_on_id": "bd-1"}, {"other": "x"}, "junk"],
        }
        issue = normalize(raw)
        assert issue.title == ""
        assert issue.owner == ""
        assert issue.description == ""
        assert issue.priority == DEFAULT_PRIORITY
        assert issue.blocked_by == ("bd-1",)

    def test_non_list_dependencies_become_empty(self) -> None:
        issue = normalize({"id": "bd-7", "dependencies": "bd-1"})
        assert issue.blocked_by == ()

    def test_unknown_status_is_open(self) -> None:
        issue = normalize({"id": "bd-8", "status": "deferred"})
        assert issue.status == IssueStatus.OPEN

    def test_accepts_validated_record(self) -> None:
        raw = RawIssue(id="bd-9", title="Validated", issue_type="bug")
        issue = normalize(raw)
        assert issue.id == "bd-9"
        assert issue.type == "bug"

    def test_numeric_id_becomes_text(self) -> None:
        issue = normalize({"id": 42, "title": "Numbered", "dependencies": [{"depends_on_id": 7}]})
        assert issue.id == "42"
        assert issue.blocked_by == ("7",)

    def test_null_id_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            normalize({"id": None})

    def test_missing_id_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            normalize({"title": "No id"})


class TestPartitionByStatus:
    def test_splits_into_three_groups(self, make_issue: Callable[..., Issue]) -> None:
        issues = [
            make_issue("A", status=IssueStatus.OPEN),
            make_issue("B", status=IssueStatus.BLOCKED),
            make_issue("C", status=IssueStatus.IN_PROGRESS),
            make_issue("D", status=IssueStatus.CLOSED),
            make_issue("E", status=IssueStatus.CLOSED),
        ]
        groups = partition_by_status(issues)
        assert len(groups.open) == 2
        assert len(groups.in_progress) == 1
        assert len(groups.closed) == 2

    def test_preserves_input_order(self, make_issue: Callable[..., Issue]) -> None:
        issues = [
            make_issue("B", status=IssueStatus.BLOCKED),
            make_issue("X", status=IssueStatus.IN_PROGRESS),
            make_issue("A", status=IssueStatus.OPEN),
        ]
        groups = partition_by_status(issues)
        assert [i.id for i in groups.open] == ["B", "A"]

    def test_rows_in_display_order(self, make_issue: Callable[..., Issue]) -> None:
        issues = [
            make_issue("C", status=IssueStatus.CLOSED),
            make_issue("P", status=IssueStatus.IN_PROGRESS),
            make_issue("O", status=IssueStatus.OPEN),
        ]
        open_, in_progress, closed = partition_by_status(issues).rows()
        assert [i.id for i in open_] == ["O"]
        assert [i.id for i in in_progress] == ["P"]
        assert [i.id for i in closed] == ["C"]

    def test_closed_capped_without_timestamps_keeps_first(
        self, make_issue: Callable[..., Issue]
    ) -> None:
        issues = [make_issue(f"C{n}", status=IssueStatus.CLOSED) for n in range(15)]
        groups = partition_by_status(issues)
        assert len(groups.closed) == CLOSED_LIMIT
        assert [i.id for i in groups.closed] == [f"C{n}" for n in range(10)]

    def test_closed_keeps_most_recently_updated(self, make_issue: Callable[..., Issue]) -> None:
        issues = [
            make_issue(f"C{n}", status=IssueStatus.CLOSED, updated_at=f"2026-01-{n + 1:02d}T00:00:00Z")
            for n in range(12)
        ]
        groups = partition_by_status(issues)
        # the two oldest drop out, survivors stay in input order
        assert [i.id for i in groups.closed] == [f"C{n}" for n in range(2, 12)]

    def test_closed_ranking_compares_instants_across_offsets(
        self, make_issue: Callable[..., Issue]
    ) -> None:
        issues = [
            make_issue(f"c{n}", status=IssueStatus.CLOSED, updated_at="2026-01-01T12:00:00Z")
            for n in range(10)
        ]
        # 10:00 at -07:00 is 17:00Z, newer than every other record
        issues.append(
            make_issue("late", status=IssueStatus.CLOSED, updated_at="2026-01-01T10:00:00-07:00")
        )
        groups = partition_by_status(issues)
        ids = [i.id for i in groups.closed]
        assert "late" in ids
        assert ids == [f"c{n}" for n in range(9)] + ["late"]

    def test_closed_unparsable_timestamps_rank_oldest(
        self, make_issue: Callable[..., Issue]
    ) -> None:
        issues = [make_issue("junk", status=IssueStatus.CLOSED, updated_at="yesterday")]
        issues += [
            make_issue(f"c{n}", status=IssueStatus.CLOSED, updated_at=f"2026-02-{n + 1:02d}T08:00:00+00:00")
            for n in range(10)
        ]
        groups = partition_by_status(issues)
        assert [i.id for i in groups.closed] == [f"c{n}" for n in range(10)]

    def test_empty_input(self) -> None:
        groups = partition_by_status([])
        assert groups.open == []
        assert groups.in_progress == []
        assert groups.closed == []
