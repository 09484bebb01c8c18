"""Split engine for gitsage.

This package provides:
- models: CommitType, CommitGroup, SelectionChoice, validate_commit_groups
- chunker: split_diff_into_chunks
- index: StagingSet, StagingSetBusyError
- scratch: scratch_file
- patch: InvalidPatchError, PatchCheck, check_patch, validate_patch, apply_patch_to_index
- stager: StagingStrategy, StageOutcome, StageResult, stage_group and friends
- writer: format_commit_message, create_commit
- orchestrator: RunState, AbortReason, SplitResult, SplitRun, split_changes
"""

# Models
from gitsage.split.models import (
    COMMIT_TYPE_ALIASES,
    CommitGroup,
    CommitType,
    SelectionChoice,
    sanitize_message,
    validate_commit_groups,
)

# Chunking
from gitsage.split.chunker import split_diff_into_chunks

# Index ownership
from gitsage.split.index import StagingSet, StagingSetBusyError

# Scratch files
from gitsage.split.scratch import scratch_file

# Patch validation
from gitsage.split.patch import (
    InvalidPatchError,
    PatchCheck,
    apply_patch_to_index,
    check_patch,
    combine_hunks,
    context_window,
    extract_error_line,
    validate_patch,
)

# Staging
from gitsage.split.stager import (
    StageOutcome,
    StageResult,
    StagingStrategy,
    resolve_hunk_paths,
    stage_files_from_hunks,
    stage_group,
    stage_patch,
    stage_paths,
)

# Commit writing
from gitsage.split.writer import create_commit, format_commit_message

# Orchestration
from gitsage.split.orchestrator import (
    DEFAULT_DEPENDENCY_MANIFESTS,
    DEFAULT_MAX_CHUNK_LENGTH,
    AbortReason,
    RunState,
    SplitResult,
    SplitRun,
    split_changes,
)


__all__ = [
    # Models
    "CommitType",
    "COMMIT_TYPE_ALIASES",
    "CommitGroup",
    "SelectionChoice",
    "sanitize_message",
    "validate_commit_groups",
    # Chunking
    "split_diff_into_chunks",
    # Index
    "StagingSet",
    "StagingSetBusyError",
    # Scratch
    "scratch_file",
    # Patch
    "InvalidPatchError",
    "PatchCheck",
    "combine_hunks",
    "extract_error_line",
    "context_window",
    "check_patch",
    "validate_patch",
    "apply_patch_to_index",
    # Staging
    "StagingStrategy",
    "StageOutcome",
    "StageResult",
    "resolve_hunk_paths",
    "stage_paths",
    "stage_files_from_hunks",
    "stage_patch",
    "stage_group",
    # Writer
    "format_commit_message",
    "create_commit",
    # Orchestration
    "DEFAULT_MAX_CHUNK_LENGTH",
    "DEFAULT_DEPENDENCY_MANIFESTS",
    "RunState",
    "AbortReason",
    "SplitResult",
    "SplitRun",
    "split_changes",
]
