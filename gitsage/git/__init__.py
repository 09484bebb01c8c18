"""Git access layer for gitsage.

This package provides:
- exceptions: GitError, GitCommandError, NotARepositoryError
- runner: run_git, run_git_quiet, get_repo_root, unquote_path
- inventory: ChangeStatus, WorkingTreeChange, get_unstaged_changes,
             get_untracked_changes, get_staged_changes, get_staged_diff,
             format_change_summary
"""

# Exceptions
from gitsage.git.exceptions import (
    GitCommandError,
    GitError,
    NotARepositoryError,
)

# Runner utilities
from gitsage.git.runner import (
    get_repo_root,
    run_git,
    run_git_quiet,
    unquote_path,
)

# Inventory
from gitsage.git.inventory import (
    ChangeStatus,
    WorkingTreeChange,
    format_change_summary,
    get_staged_changes,
    get_staged_diff,
    get_unstaged_changes,
    get_untracked_changes,
    parse_name_status,
    status_marker,
)


__all__ = [
    # Exceptions
    "GitError",
    "GitCommandError",
    "NotARepositoryError",
    # Runner
    "run_git",
    "run_git_quiet",
    "get_repo_root",
    "unquote_path",
    # Inventory
    "ChangeStatus",
    "WorkingTreeChange",
    "parse_name_status",
    "status_marker",
    "get_unstaged_changes",
    "get_untracked_changes",
    "get_staged_changes",
    "get_staged_diff",
    "format_change_summary",
]
