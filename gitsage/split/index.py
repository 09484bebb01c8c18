"""The git index as a single-owner resource.

Contains:
- StagingSetBusyError: Raised when a second StagingSet is requested
- StagingSet: Handle through which every index mutation goes

Only code holding the StagingSet can stage, apply patches to the index,
commit or reset. The orchestrator acquires it once per run and passes it
explicitly to the stager and the commit writer.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from gitsage.git.inventory import WorkingTreeChange, get_staged_changes
from gitsage.git.runner import PLAIN_PATHS, run_git


class StagingSetBusyError(RuntimeError):
    """Raised when the index is already held by another StagingSet."""

    pass


class StagingSet:
    """Exclusive handle on the repository index."""

    _held = False

    def __init__(self, repo_root: Path):
        self.repo_root = repo_root

    @classmethod
    @contextmanager
    def acquire(cls, repo_root: Path) -> Iterator["StagingSet"]:
        """Acquire the index for the duration of the block.

        Args:
            repo_root: Repository root path.

        Yields:
            The StagingSet handle.

        Raises:
            StagingSetBusyError: If the index is already held.
        """
        if cls._held:
            raise StagingSetBusyError("The index is already held by another run.")
        cls._held = True
        try:
            yield cls(repo_root)
        finally:
            cls._held = False

    def resolve(self, path: str) -> Path:
        """Resolve a repository-relative path against the repo root."""
        return self.repo_root / path

    def staged_files(self) -> list[WorkingTreeChange]:
        """Get the files currently staged."""
        return get_staged_changes(cwd=self.repo_root)

    def is_empty(self) -> bool:
        """Check whether nothing is staged."""
        return not self.staged_files()

    def add(self, path: str) -> None:
        """Stage a file's working tree content."""
        run_git(["add", "--", path], cwd=self.repo_root)

    def remove(self, path: str) -> None:
        """Stage the deletion of a file."""
        run_git(["rm", "--quiet", "--", path], cwd=self.repo_root)

    def check_patch(self, patch_file: Path) -> None:
        """Dry-run a patch against the index. Raises GitCommandError on failure."""
        run_git(["apply", "--check", "--cached", str(patch_file)], cwd=self.repo_root)

    def apply_patch(self, patch_file: Path) -> None:
        """Apply a patch to the index only, leaving the working tree untouched."""
        run_git(["apply", "--cached", str(patch_file)], cwd=self.repo_root)

    def commit(self, message_file: Path) -> str:
        """Commit the index with the message in message_file.

        Returns:
            The new commit hash.
        """
        run_git(["commit", "--quiet", "-F", str(message_file)], cwd=self.repo_root)
        return run_git(["rev-parse", "HEAD"], cwd=self.repo_root)

    def staged_patch(self, paths: list[str]) -> str:
        """Get the staged changes of the given paths as a binary-safe patch.

        Rename detection is off, so a path that is the target of a staged
        rename shows up as an added file.

        Returns:
            The patch text, or "" when paths is empty.
        """
        if not paths:
            return ""
        return run_git(
            PLAIN_PATHS + ["diff", "--cached", "--binary", "--no-renames", "--", *paths],
            strip=False,
            cwd=self.repo_root,
        )

    def unstage(self, paths: list[str]) -> None:
        """Reset the index entries of the given paths to HEAD."""
        run_git(["reset", "--quiet", "--", *paths], cwd=self.repo_root)

    def reset(self) -> None:
        """Unstage everything, keeping working tree changes."""
        run_git(["reset", "--quiet"], cwd=self.repo_root)
