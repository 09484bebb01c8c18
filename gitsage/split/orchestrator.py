"""Partition orchestration for gitsage split.

Contains:
- RunState: States of a split run
- AbortReason: Why a run ended without committing
- SplitResult: Outcome of a split run
- SplitRun: The split run as a finite-state machine
- split_changes: Acquire the index and run a split

A run inventories the working tree, optionally asks which files to stage,
chunks the staged diff for the classifier, asks for confirmation and then
commits each classified group in order. Staged dependency manifests are held
out of the classified diff and committed first, once the groups are
confirmed. Every group is staged from a clean index and any group that stages
nothing is skipped with a warning. Commit failures propagate; commits already
created are left in place.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable, Optional

from gitsage import output
from gitsage.config import DEFAULT_DEPENDENCY_MANIFESTS, DEFAULT_MAX_CHUNK_LENGTH
from gitsage.git.inventory import (
    WorkingTreeChange,
    format_change_summary,
    get_staged_diff,
    get_unstaged_changes,
    get_untracked_changes,
)
from gitsage.split.chunker import split_diff_into_chunks
from gitsage.split.index import StagingSet
from gitsage.split.models import CommitGroup, CommitType, SelectionChoice
from gitsage.split.patch import apply_patch_to_index
from gitsage.split.stager import StageOutcome, StagingStrategy, stage_group, stage_paths
from gitsage.split.writer import create_commit

DEPENDENCY_COMMIT_MESSAGE = "update dependencies"

# Collaborator signatures
SelectFiles = Callable[[list[SelectionChoice]], Iterable[str]]
ClassifyChunks = Callable[[list[str]], list[CommitGroup]]
ConfirmGroups = Callable[[list[CommitGroup]], bool]


class RunState(str, Enum):
    """States of a split run."""

    IDLE = "idle"
    INVENTORYING = "inventorying"
    AWAITING_SELECTION = "awaiting_selection"
    CHUNKING = "chunking"
    CLASSIFYING = "classifying"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMITTING_DEPENDENCIES = "committing_dependencies"
    COMMITTING = "committing"
    DONE = "done"
    ABORTED = "aborted"


# Held-back manifests are out of the index and nothing else has changed it
_HOLDING_STATES = (RunState.CHUNKING, RunState.CLASSIFYING, RunState.AWAITING_CONFIRMATION)


class AbortReason(str, Enum):
    """Why a run stopped before committing. Values are the user-facing text."""

    NO_CHANGES = "No changes detected."
    NOTHING_SELECTED = "No files were selected to stage."
    NOTHING_STAGED = "No files were staged."
    NO_GROUPS = "AI did not generate any commit messages. Aborting."
    DECLINED = "Commit process aborted by user."


@dataclass
class SplitResult:
    """Outcome of a split run."""

    state: RunState
    abort_reason: Optional[AbortReason] = None
    groups: list[CommitGroup] = field(default_factory=list)
    commits: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    dependency_commit: Optional[str] = None
    history: list[RunState] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.state == RunState.DONE

    @property
    def summary(self) -> str:
        """One-line description of how the run ended."""
        if self.abort_reason is not None:
            return self.abort_reason.value
        if not self.skipped:
            return "All commits created successfully!"
        return f"Created {len(self.commits)} of {len(self.groups)} commits."


class SplitRun:
    """One split run over a held index.

    Each state has a handler returning the next state. The collaborators
    (file selection, classification, confirmation) are injected so the run
    itself never prompts or calls a model.
    """

    def __init__(
        self,
        index: StagingSet,
        select_files: SelectFiles,
        classify: ClassifyChunks,
        confirm: ConfirmGroups,
        max_chunk_length: int = DEFAULT_MAX_CHUNK_LENGTH,
        strategy: StagingStrategy = StagingStrategy.FILES,
        dependency_manifests: Iterable[str] = DEFAULT_DEPENDENCY_MANIFESTS,
    ):
        self.index = index
        self.select_files = select_files
        self.classify = classify
        self.confirm = confirm
        self.max_chunk_length = max_chunk_length
        self.strategy = StagingStrategy(strategy)
        self.dependency_manifests = frozenset(dependency_manifests)

        self.state = RunState.IDLE
        self.result = SplitResult(state=RunState.IDLE)

        self._handlers = {
            RunState.IDLE: self._start,
            RunState.INVENTORYING: self._inventory,
            RunState.AWAITING_SELECTION: self._await_selection,
            RunState.CHUNKING: self._chunk,
            RunState.CLASSIFYING: self._classify,
            RunState.AWAITING_CONFIRMATION: self._await_confirmation,
            RunState.COMMITTING_DEPENDENCIES: self._commit_dependencies,
            RunState.COMMITTING: self._commit_next_group,
        }

        self._dependency_patch = ""
        self._staged: list[WorkingTreeChange] = []
        self._candidates: list[WorkingTreeChange] = []
        self._diff = ""
        self._chunks: list[str] = []
        self._group_index = 0

    @property
    def cwd(self) -> Path:
        return self.index.repo_root

    def run(self) -> SplitResult:
        """Drive the run from Idle to Done or Aborted.

        Returns:
            The SplitResult of the run.

        Raises:
            GitError: On environmental or commit failures.
        """
        try:
            while self.state not in (RunState.DONE, RunState.ABORTED):
                self.result.history.append(self.state)
                self.state = self._handlers[self.state]()
        except Exception:
            if self.state in _HOLDING_STATES:
                self._restore_dependencies()
            raise

        self.result.history.append(self.state)
        self.result.state = self.state
        return self.result

    def _abort(self, reason: AbortReason) -> RunState:
        self._restore_dependencies()
        self.result.abort_reason = reason
        return RunState.ABORTED

    def _start(self) -> RunState:
        return RunState.INVENTORYING

    def _inventory(self) -> RunState:
        self._staged = self.index.staged_files()

        if self._staged:
            self._hold_back_dependencies()
            self._diff = get_staged_diff(cwd=self.cwd)
            return RunState.CHUNKING

        self._candidates = get_unstaged_changes(cwd=self.cwd) + get_untracked_changes(cwd=self.cwd)
        if not self._candidates:
            return self._abort(AbortReason.NO_CHANGES)
        return RunState.AWAITING_SELECTION

    def _await_selection(self) -> RunState:
        choices = [SelectionChoice.from_change(c) for c in self._candidates]
        selected = set(self.select_files(choices))
        if not selected:
            return self._abort(AbortReason.NOTHING_SELECTED)

        # Keep the order the files were offered in
        stage_paths(self.index, [c.path for c in choices if c.path in selected])

        self._staged = self.index.staged_files()
        if not self._staged:
            return self._abort(AbortReason.NOTHING_STAGED)

        self._diff = get_staged_diff(cwd=self.cwd)
        return RunState.CHUNKING

    def _manifest_paths(self) -> list[str]:
        return [
            c.path for c in self._staged
            if PurePosixPath(c.path).name in self.dependency_manifests
        ]

    def _hold_back_dependencies(self) -> None:
        """Take staged manifests out of the index for their own commit.

        Their staged patch is kept for the dependency commit and only their
        index entries are reset, so everything else stays staged as it was.
        When nothing but manifests is staged they are split like any other
        change.
        """
        manifests = self._manifest_paths()
        if not manifests or len(manifests) == len(self._staged):
            return

        self._dependency_patch = self.index.staged_patch(manifests)
        self.index.unstage(manifests)
        self._staged = self.index.staged_files()

    def _restore_dependencies(self) -> None:
        """Put held-back manifests back into the index."""
        if self._dependency_patch:
            patch, self._dependency_patch = self._dependency_patch, ""
            apply_patch_to_index(self.index, patch)

    def _commit_dependencies(self) -> RunState:
        patch, self._dependency_patch = self._dependency_patch, ""
        apply_patch_to_index(self.index, patch)

        if self.index.is_empty():
            output.warn("Dependency changes could not be staged; continuing without a dependency commit.")
        else:
            commit_hash = create_commit(self.index, CommitType.CHORE, DEPENDENCY_COMMIT_MESSAGE)
            self.result.dependency_commit = commit_hash
            output.info(f"Committed dependency changes: chore: {DEPENDENCY_COMMIT_MESSAGE}")

        self.index.reset()
        return RunState.COMMITTING

    def _chunk(self) -> RunState:
        summary = format_change_summary(self._staged)
        if summary:
            output.info(summary)
            output.info()

        self._chunks = split_diff_into_chunks(self._diff, self.max_chunk_length)
        return RunState.CLASSIFYING

    def _classify(self) -> RunState:
        groups = list(self.classify(self._chunks))
        if not groups:
            return self._abort(AbortReason.NO_GROUPS)
        self.result.groups = groups
        return RunState.AWAITING_CONFIRMATION

    def _await_confirmation(self) -> RunState:
        if not self.confirm(self.result.groups):
            return self._abort(AbortReason.DECLINED)

        self.index.reset()
        self._group_index = 0
        if self._dependency_patch:
            return RunState.COMMITTING_DEPENDENCIES
        return RunState.COMMITTING

    def _commit_next_group(self) -> RunState:
        group = self.result.groups[self._group_index]
        self._group_index += 1

        commit_hash = self._commit_group(group)
        if commit_hash is None:
            self.result.skipped.append(group.subject)
        else:
            self.result.commits.append(commit_hash)

        self.index.reset()

        if self._group_index < len(self.result.groups):
            return RunState.COMMITTING
        return RunState.DONE

    def _commit_group(self, group: CommitGroup) -> Optional[str]:
        """Stage and commit one group. Returns None when the group is skipped."""
        if not group.hunks:
            output.warn(f"No hunks for commit '{group.subject}'. Skipping.")
            return None

        staged = stage_group(self.index, group.hunks, self.strategy)
        if staged.outcome == StageOutcome.NO_FILES:
            output.warn(f"No files found in hunks for commit '{group.subject}'. Skipping.")
            return None
        if staged.outcome == StageOutcome.INVALID_PATCH:
            output.warn(f"Invalid patch for commit '{group.subject}'. Skipping.")
            return None
        if self.index.is_empty():
            output.warn(f"No changes staged for commit '{group.subject}'. Skipping.")
            return None

        commit_hash = create_commit(self.index, group.type, group.message)
        output.info(f"Committed: {group.subject}")
        return commit_hash


def split_changes(
    repo_root: Path,
    select_files: SelectFiles,
    classify: ClassifyChunks,
    confirm: ConfirmGroups,
    max_chunk_length: int = DEFAULT_MAX_CHUNK_LENGTH,
    strategy: StagingStrategy = StagingStrategy.FILES,
    dependency_manifests: Iterable[str] = DEFAULT_DEPENDENCY_MANIFESTS,
) -> SplitResult:
    """Acquire the repository index and run one split over it.

    Args:
        repo_root: Repository root path.
        select_files: Asks which of the offered files to stage.
        classify: Turns diff chunks into commit groups.
        confirm: Asks whether to apply the proposed groups.
        max_chunk_length: Maximum classifier chunk size in characters.
        strategy: Staging strategy for each group.
        dependency_manifests: File names committed separately when staged.

    Returns:
        The SplitResult of the run.

    Raises:
        StagingSetBusyError: If another run holds the index.
        GitError: On environmental or commit failures.
    """
    with StagingSet.acquire(repo_root) as index:
        run = SplitRun(
            index,
            select_files=select_files,
            classify=classify,
            confirm=confirm,
            max_chunk_length=max_chunk_length,
            strategy=strategy,
            dependency_manifests=dependency_manifests,
        )
        return run.run()
