"""Working tree and index inventory.

Contains:
- ChangeStatus: Status of a changed path
- WorkingTreeChange: A single changed path with its status
- get_unstaged_changes: Tracked files with unstaged modifications
- get_untracked_changes: Files not tracked by git
- get_staged_changes: Files staged in the index
- get_staged_diff: Unified diff of the index against HEAD
- format_change_summary: Human-readable summary of staged changes

All queries go through run_git_quiet, so a failed query yields no data.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from gitsage.git.runner import PLAIN_PATHS, run_git_quiet, unquote_path


class ChangeStatus(str, Enum):
    """Status of a changed path in the working tree or index."""

    MODIFIED = "M"
    DELETED = "D"
    ADDED = "A"
    RENAMED = "R"
    COPIED = "C"
    UNTRACKED = "?"
    UNKNOWN = "X"

    @classmethod
    def from_code(cls, code: str) -> "ChangeStatus":
        """Map a git --name-status code (e.g. "M", "R100") to a status."""
        if not code:
            return cls.UNKNOWN
        try:
            return cls(code[0])
        except ValueError:
            return cls.UNKNOWN


_STATUS_MARKERS = {
    ChangeStatus.MODIFIED: "📝",
    ChangeStatus.DELETED: "🗑️",
    ChangeStatus.ADDED: "➕",
    ChangeStatus.UNTRACKED: "➕",
}


@dataclass(frozen=True)
class WorkingTreeChange:
    """A changed path and its status."""

    path: str
    status: ChangeStatus

    @property
    def marker(self) -> str:
        """Short visual marker for the status."""
        return status_marker(self.status)


def status_marker(status: ChangeStatus) -> str:
    """Get the display marker for a change status.

    Args:
        status: The change status.

    Returns:
        A single marker string; unknown statuses get a question mark.
    """
    return _STATUS_MARKERS.get(status, "❓")


def parse_name_status(output: str) -> list[WorkingTreeChange]:
    """Parse `git diff --name-status` output.

    Renames and copies list two paths; the destination path is kept.
    Quoted paths are decoded.

    Args:
        output: Raw name-status output.

    Returns:
        List of WorkingTreeChange in output order.
    """
    changes: list[WorkingTreeChange] = []
    for line in output.split("\n"):
        if not line.strip():
            continue
        fields = line.split("\t")
        if len(fields) < 2:
            continue
        changes.append(
            WorkingTreeChange(
                path=unquote_path(fields[-1]),
                status=ChangeStatus.from_code(fields[0]),
            )
        )
    return changes


def get_unstaged_changes(cwd: Optional[Path] = None) -> list[WorkingTreeChange]:
    """Get tracked files with changes not yet staged.

    Args:
        cwd: Repository root to query.

    Returns:
        List of unstaged changes.
    """
    return parse_name_status(run_git_quiet(PLAIN_PATHS + ["diff", "--name-status"], cwd=cwd))


def get_untracked_changes(cwd: Optional[Path] = None) -> list[WorkingTreeChange]:
    """Get files not tracked by git, honouring ignore rules.

    Args:
        cwd: Repository root to query. Paths are relative to it.

    Returns:
        List of untracked changes.
    """
    output = run_git_quiet(
        PLAIN_PATHS + ["ls-files", "--others", "--exclude-standard"], cwd=cwd
    )
    return [
        WorkingTreeChange(path=unquote_path(path), status=ChangeStatus.UNTRACKED)
        for path in output.split("\n")
        if path.strip()
    ]


def get_staged_changes(cwd: Optional[Path] = None) -> list[WorkingTreeChange]:
    """Get files staged in the index.

    Args:
        cwd: Repository root to query.

    Returns:
        List of staged changes.
    """
    output = run_git_quiet(PLAIN_PATHS + ["diff", "--staged", "--name-status"], cwd=cwd)
    return parse_name_status(output)


def get_staged_diff(cwd: Optional[Path] = None) -> str:
    """Get the unified diff of staged changes.

    Args:
        cwd: Repository root to query.

    Returns:
        The staged diff, or an empty string if there is none.
    """
    return run_git_quiet(PLAIN_PATHS + ["diff", "--staged"], cwd=cwd)


def format_change_summary(changes: list[WorkingTreeChange]) -> str:
    """Format staged changes as a summary block for display.

    Args:
        changes: Staged changes.

    Returns:
        Multi-line summary, or an empty string if there are no changes.
    """
    if not changes:
        return ""

    lines = ["Git Changes Summary:", "=" * 19, "", "Staged Changes:"]
    for change in changes:
        lines.append(f"  {change.marker} {change.path}")
    lines.append("")
    lines.append(f"Total Changes: {len(changes)}")
    return "\n".join(lines)
