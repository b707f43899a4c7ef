"""Fetch issues from the bd command line tool."""

import json
import logging
import subprocess

from pydantic import ValidationError

from beadboard.config import Config
from beadboard.models import IssueStatus, RawIssue, StatusGroups, normalize, partition_by_status

logger = logging.getLogger(__name__)


def _run_bd(status: IssueStatus, config: Config) -> str:
    """Run `bd list --json --status=<status>` and return its stdout.

    Raises:
        OSError: If the bd executable cannot be started
        subprocess.SubprocessError: On non-zero exit or timeout
    """
    result = subprocess.run(
        [config.bd_command, "list", "--json", f"--status={status.value}"],
        check=True,
        capture_output=True,
        text=True,
        timeout=config.timeout,
    )
    return result.stdout


def parse_records(output: str) -> list[RawIssue]:
    """Parse bd JSON output into raw records.

    Records that fail validation are skipped. A null document is an empty
    list.

    Raises:
        json.JSONDecodeError: If the output is not JSON
        ValueError: If the document is not a list
    """
    data = json.loads(output)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON list, got {type(data).__name__}")

    records: list[RawIssue] = []
    for item in data:
        try:
            records.append(RawIssue.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed issue record: {e.error_count()} error(s)")
    return records


def fetch_by_status(status: IssueStatus, config: Config) -> list[RawIssue]:
    """Fetch raw records for one status.

    Every failure (missing binary, error exit, timeout, bad JSON) is logged
    and yields an empty list.
    """
    try:
        output = _run_bd(status, config)
        return parse_records(output)
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        logger.warning(f"bd list --status={status.value} failed ({e.returncode}): {stderr}")
    except subprocess.TimeoutExpired:
        logger.warning(f"bd list --status={status.value} timed out after {config.timeout:g}s")
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning(f"Could not run {config.bd_command}: {e}")
    except ValueError as e:
        logger.warning(f"Unreadable bd output for --status={status.value}: {e}")
    return []


def fetch_groups(config: Config) -> StatusGroups:
    """Fetch every status from bd and partition the result for display."""
    raw: list[RawIssue] = []
    for status in (IssueStatus.OPEN, IssueStatus.BLOCKED, IssueStatus.IN_PROGRESS, IssueStatus.CLOSED):
        raw.extend(fetch_by_status(status, config))

    seen: set[str] = set()
    issues = []
    for record in raw:
        if record.id in seen:
            continue
        seen.add(record.id)
        issues.append(normalize(record))
    logger.debug(f"Fetched {len(issues)} issues")
    return partition_by_status(issues)
