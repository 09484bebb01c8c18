"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- GitCommandError: Raised when a git invocation exits non-zero
- NotARepositoryError: Raised when not inside a git work tree
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class GitCommandError(GitError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Git command failed: git {' '.join(command)}\n{stderr}")


class NotARepositoryError(GitError):
    """Raised when the current directory is not inside a git repository."""

    pass
