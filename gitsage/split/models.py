"""Data models for the gitsage split engine.

Contains:
- CommitType: Conventional commit types accepted from the classifier
- CommitGroup: One classifier-proposed commit (type, message, hunks)
- SelectionChoice: One entry offered to the interactive file selector
- sanitize_message: Clean a commit message
- validate_commit_groups: Shape-check a decoded classifier payload
"""

import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

from gitsage.git.inventory import ChangeStatus, WorkingTreeChange


class CommitType(str, Enum):
    """Conventional commit types."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"


# Control characters other than tab and newline
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


def sanitize_message(message: str) -> str:
    """Strip control characters and surrounding whitespace from a message.

    Args:
        message: Raw commit message text.

    Returns:
        The cleaned message.

    Raises:
        ValueError: If nothing is left after cleaning.
    """
    cleaned = _CONTROL_CHARS_RE.sub("", message.replace("\r\n", "\n")).strip()
    if not cleaned:
        raise ValueError("commit message must not be empty")
    return cleaned


# Alternative names that map to standard commit types
COMMIT_TYPE_ALIASES = {
    "feature": CommitType.FEAT,
    "bugfix": CommitType.FIX,
    "documentation": CommitType.DOCS,
    "performance": CommitType.PERF,
}


class CommitGroup(BaseModel):
    """A classifier-proposed commit: type, message and the hunks it owns."""

    model_config = ConfigDict(frozen=True)

    type: CommitType
    message: str
    hunks: tuple[str, ...] = ()

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        """Accept aliases and any casing for the commit type."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            return COMMIT_TYPE_ALIASES.get(lowered, lowered)
        return value

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        return sanitize_message(value)

    @property
    def subject(self) -> str:
        """The "<type>: <message>" commit subject."""
        return f"{self.type.value}: {self.message}"


_COMMIT_GROUP_LIST = TypeAdapter(list[CommitGroup])


def validate_commit_groups(payload: object) -> list[CommitGroup]:
    """Validate a decoded classifier payload into commit groups.

    The payload must be a JSON array of {type, message, hunks} records.
    Any record failing the shape check rejects the whole payload.

    Args:
        payload: Decoded JSON value.

    Returns:
        Validated commit groups in payload order.

    Raises:
        ValueError: If the payload is not an array of valid records.
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
    return _COMMIT_GROUP_LIST.validate_python(payload)


@dataclass(frozen=True)
class SelectionChoice:
    """A file offered to the interactive selector."""

    label: str
    path: str
    status: ChangeStatus

    @classmethod
    def from_change(cls, change: WorkingTreeChange) -> "SelectionChoice":
        return cls(
            label=f"{change.marker} {change.path}",
            path=change.path,
            status=change.status,
        )
