"""Commit creation.

Contains:
- format_commit_message: Build the "<type>: <message>" commit message
- create_commit: Create one commit from the index

The message reaches git through a message file (`git commit -F`), never
through a shell command line, so no shell quoting applies to it.
"""

from typing import Optional, Sequence, Union

from gitsage.split.index import StagingSet
from gitsage.split.models import CommitType, sanitize_message
from gitsage.split.patch import InvalidPatchError
from gitsage.split.scratch import scratch_file
from gitsage.split.stager import StageOutcome, stage_patch


def format_commit_message(commit_type: Union[CommitType, str], message: str) -> str:
    """Build the commit message "<type>: <message>".

    Args:
        commit_type: A CommitType or its string value.
        message: The commit description.

    Returns:
        The full commit message.

    Raises:
        ValueError: If the type is unknown or the message is empty.
    """
    commit_type = CommitType(commit_type)
    return f"{commit_type.value}: {sanitize_message(message)}"


def create_commit(
    index: StagingSet,
    commit_type: Union[CommitType, str],
    message: str,
    hunks: Optional[Sequence[str]] = None,
) -> str:
    """Create one commit from the index.

    When hunks are given they are first applied to the index as a patch.
    Git failures propagate unchanged.

    Args:
        index: The held staging set.
        commit_type: Conventional commit type.
        message: Commit description.
        hunks: Optional hunk texts to stage before committing.

    Returns:
        The new commit hash.

    Raises:
        InvalidPatchError: If the hunks do not apply to the index.
        GitCommandError: If staging or committing fails.
    """
    full_message = format_commit_message(commit_type, message)

    if hunks:
        result = stage_patch(index, hunks)
        if result.outcome != StageOutcome.STAGED:
            raise InvalidPatchError(f"Hunks for '{full_message}' do not apply to the index.")

    with scratch_file(full_message + "\n", suffix=".msg") as message_file:
        return index.commit(message_file)
