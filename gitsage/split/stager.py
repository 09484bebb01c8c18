"""Selective staging of one commit group.

Contains:
- StagingStrategy: How a group's hunks are turned into index changes
- StageOutcome / StageResult: What staging a group produced
- resolve_hunk_paths: Files named by the diff headers of a group's hunks
- stage_paths: Stage the working tree state of a set of paths
- stage_files_from_hunks: Stage whole files named by the hunks
- stage_patch: Apply the hunk text itself to the index
- stage_group: Dispatch on the configured strategy
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from gitsage import output
from gitsage.git.exceptions import GitCommandError
from gitsage.git.runner import unquote_path
from gitsage.split.index import StagingSet
from gitsage.split.patch import apply_patch_to_index, combine_hunks, validate_patch

_DIFF_HEADER = "diff --git "


class StagingStrategy(str, Enum):
    """How a group's hunks are staged."""

    FILES = "files"  # Stage whole files named by the hunk headers
    PATCH = "patch"  # Apply the hunk text to the index


class StageOutcome(str, Enum):
    """Result of staging one group."""

    STAGED = "staged"
    INVALID_PATCH = "invalid_patch"
    NO_FILES = "no_files"


@dataclass
class StageResult:
    """What staging a group did."""

    outcome: StageOutcome
    staged_paths: list[str] = field(default_factory=list)
    failed_paths: list[str] = field(default_factory=list)


def _closing_quote(text: str) -> Optional[int]:
    """Index of the quote closing a C-quoted token that starts text."""
    i = 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i
        i += 1
    return None


def _strip_side(path: str, side: str) -> Optional[str]:
    return path[len(side):] if path.startswith(side) else None


def _header_destination(header: str) -> Optional[str]:
    """Get the b/ path of a `diff --git` header.

    Returns None when an unquoted header is ambiguous, which only happens
    for renames and copies whose paths contain " b/".
    """
    rest = header[len(_DIFF_HEADER):]
    if rest.startswith('"'):
        end = _closing_quote(rest)
        if end is None:
            return None
        return _strip_side(unquote_path(rest[end + 1:].lstrip(" ")), "b/")
    if rest.endswith('"'):
        start = rest.rfind(' "')
        if start == -1:
            return None
        return _strip_side(unquote_path(rest[start + 1:]), "b/")

    # "a/X b/X" for everything but renames and copies
    length, odd = divmod(len(rest) - len("a/ b/"), 2)
    if length > 0 and not odd:
        path = rest[2:2 + length]
        if rest == f"a/{path} b/{path}":
            return path
    return None


def _split_file_diffs(hunk: str) -> list[list[str]]:
    """Split hunk text into per-file blocks, each starting with its header."""
    blocks: list[list[str]] = []
    for line in hunk.split("\n"):
        if line.startswith(_DIFF_HEADER):
            blocks.append([line])
        elif blocks:
            blocks[-1].append(line)
    return blocks


def _block_paths(block: list[str]) -> list[str]:
    """Paths touched by one file diff: the destination, then a rename source."""
    destination = _header_destination(block[0])
    source = None
    for line in block[1:]:
        if line.startswith("@@"):
            break
        if line.startswith("rename from "):
            source = unquote_path(line[len("rename from "):])
        elif line.startswith("rename to "):
            destination = unquote_path(line[len("rename to "):])
        elif line.startswith("copy to "):
            destination = unquote_path(line[len("copy to "):])
        elif line.startswith("+++ ") and destination is None:
            destination = _strip_side(unquote_path(line[4:].rstrip("\t")), "b/")

    if destination is None:
        # Header-only rename without extended lines; take the first " b/"
        rest = block[0][len(_DIFF_HEADER):]
        if rest.startswith("a/") and " b/" in rest:
            destination = rest.split(" b/", 1)[1]

    return [p for p in (destination, source) if p]


def resolve_hunk_paths(hunks: Iterable[str]) -> list[str]:
    """Collect the paths named by the file diffs in a group's hunks.

    Each file diff contributes its destination path and, for a rename, its
    source path so the deletion is staged too. Quoted paths are decoded.

    Args:
        hunks: Hunk texts of one group.

    Returns:
        Unique paths in first-seen order.
    """
    paths: dict[str, None] = {}
    for hunk in hunks:
        for block in _split_file_diffs(hunk):
            for path in _block_paths(block):
                paths[path] = None
    return list(paths)


def stage_files_from_hunks(index: StagingSet, hunks: Iterable[str]) -> StageResult:
    """Stage every file named by the group's hunks.

    Each path is staged once, however many hunks name it.

    Args:
        index: The held staging set.
        hunks: Hunk texts of one group.

    Returns:
        StageResult; NO_FILES when no diff header could be resolved.
    """
    paths = resolve_hunk_paths(hunks)
    if not paths:
        return StageResult(outcome=StageOutcome.NO_FILES)
    return stage_paths(index, paths)


def stage_paths(index: StagingSet, paths: Iterable[str]) -> StageResult:
    """Stage the working tree state of each path.

    Existing files are added and missing files are staged as deletions.
    A path that fails to stage is reported and skipped.

    Args:
        index: The held staging set.
        paths: Repository-relative paths.

    Returns:
        StageResult listing staged and failed paths.
    """
    result = StageResult(outcome=StageOutcome.STAGED)
    for path in paths:
        try:
            if index.resolve(path).exists():
                index.add(path)
            else:
                index.remove(path)
        except GitCommandError as e:
            output.warn(f"Failed to stage file: {path} ({e.stderr})")
            result.failed_paths.append(path)
            continue
        result.staged_paths.append(path)

    return result


def stage_patch(index: StagingSet, hunks: Iterable[str]) -> StageResult:
    """Apply the group's combined hunk text to the index.

    The combined patch is validated first; an invalid patch stages nothing.

    Args:
        index: The held staging set.
        hunks: Hunk texts of one group.

    Returns:
        StageResult; INVALID_PATCH when validation fails.

    Raises:
        GitCommandError: If a validated patch then fails to apply.
    """
    hunks = list(hunks)
    patch_text = combine_hunks(hunks)
    if not validate_patch(index, patch_text):
        return StageResult(outcome=StageOutcome.INVALID_PATCH)

    apply_patch_to_index(index, patch_text)
    return StageResult(
        outcome=StageOutcome.STAGED,
        staged_paths=resolve_hunk_paths(hunks),
    )


def stage_group(
    index: StagingSet,
    hunks: Iterable[str],
    strategy: StagingStrategy = StagingStrategy.FILES,
) -> StageResult:
    """Stage one group's hunks with the given strategy.

    Args:
        index: The held staging set.
        hunks: Hunk texts of one group.
        strategy: Which staging strategy to use.

    Returns:
        The StageResult of the chosen strategy.
    """
    if strategy == StagingStrategy.PATCH:
        return stage_patch(index, hunks)
    return stage_files_from_hunks(index, hunks)
