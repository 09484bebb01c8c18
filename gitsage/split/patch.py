"""Patch validation and index-only application.

Contains:
- InvalidPatchError: Raised when hunk text does not apply to the index
- PatchCheck: Outcome of a dry-run apply with diagnostics
- combine_hunks: Join hunk texts into one patch
- check_patch: Dry-run a patch against the index
- validate_patch: Dry-run a patch and report diagnostics
- apply_patch_to_index: Apply a patch to the index only

Every patch is written to its own scratch file, which is removed on every
exit path.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from gitsage import output
from gitsage.git.exceptions import GitCommandError
from gitsage.split.index import StagingSet
from gitsage.split.scratch import scratch_file

CONTEXT_RADIUS = 2

# e.g. "error: corrupt patch at line 7"
_ERROR_LINE_RE = re.compile(r"\bline (\d+)\b")


class InvalidPatchError(Exception):
    """Raised when a patch does not apply cleanly to the index."""

    pass


@dataclass
class PatchCheck:
    """Result of a dry-run apply."""

    ok: bool
    error: str = ""
    line: Optional[int] = None
    context: list[str] = field(default_factory=list)


def combine_hunks(hunks: Iterable[str]) -> str:
    """Concatenate hunk texts in order into a single patch.

    git apply requires every block, and so the patch, to end with a newline.
    """
    return "".join(h if h.endswith("\n") else h + "\n" for h in hunks if h)


def extract_error_line(error: str) -> Optional[int]:
    """Extract a 1-based patch line number from a git apply error.

    Args:
        error: The stderr of git apply.

    Returns:
        The line number, or None if the error names none.
    """
    match = _ERROR_LINE_RE.search(error)
    if match:
        return int(match.group(1))
    return None


def context_window(text: str, line: int, radius: int = CONTEXT_RADIUS) -> list[str]:
    """Get numbered lines around a 1-based line of text.

    Args:
        text: The patch text.
        line: The 1-based line of interest.
        radius: Lines to show before and after.

    Returns:
        Formatted lines; the line of interest is marked with ">".
        Empty if line is out of range.
    """
    lines = text.split("\n")
    if line < 1 or line > len(lines):
        return []

    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    window = []
    for number in range(start, end + 1):
        marker = ">" if number == line else " "
        window.append(f"{marker} {number:>5} | {lines[number - 1]}")
    return window


def check_patch(index: StagingSet, patch_text: str) -> PatchCheck:
    """Dry-run a patch against the index without modifying it.

    Args:
        index: The held staging set.
        patch_text: The candidate patch.

    Returns:
        PatchCheck with ok=True, or the error and its context window.
    """
    with scratch_file(patch_text) as patch_file:
        try:
            index.check_patch(patch_file)
        except GitCommandError as e:
            line = extract_error_line(e.stderr)
            context = context_window(patch_text, line) if line else []
            return PatchCheck(ok=False, error=e.stderr, line=line, context=context)
    return PatchCheck(ok=True)


def validate_patch(index: StagingSet, patch_text: str) -> bool:
    """Check whether a patch applies cleanly to the index.

    On failure the git error and, when a line number can be found, the
    surrounding patch lines are printed.

    Args:
        index: The held staging set.
        patch_text: The candidate patch.

    Returns:
        True if the patch applies cleanly.
    """
    result = check_patch(index, patch_text)
    if not result.ok:
        output.detail(f"Patch validation failed: {result.error}")
        if result.context:
            output.detail(f"Patch context around line {result.line}:")
            for context_line in result.context:
                output.detail(context_line)
    return result.ok


def apply_patch_to_index(index: StagingSet, patch_text: str) -> None:
    """Apply a patch to the index, leaving the working tree untouched.

    Args:
        index: The held staging set.
        patch_text: A patch that has passed validation.

    Raises:
        GitCommandError: If git apply fails.
    """
    with scratch_file(patch_text) as patch_file:
        index.apply_patch(patch_file)
