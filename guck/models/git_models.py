"""Git-related model classes."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class FileStatus(str, Enum):
    """Enum for file change statuses."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    UNTRACKED = "untracked"


class DiffMode(str, Enum):
    """Which two states of the repository are compared."""

    BRANCH = "branch"  # merge base with the base branch vs HEAD
    WORKING = "working"  # HEAD vs working tree, plus untracked files
    STAGED = "staged"  # HEAD vs index

    @classmethod
    def coerce(cls, value: Any) -> "DiffMode":
        """Map any value onto a mode, falling back to branch mode."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.BRANCH


class FileChange(BaseModel):
    """Represents a file change detected by git diff."""

    path: str
    status: FileStatus
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    patch: str = ""


class ComparisonRequest(BaseModel):
    """Input of a single diff computation."""

    mode: DiffMode = DiffMode.BRANCH
    base_branch: str = "main"  # only used in branch mode

    @field_validator("mode", mode="before")
    @classmethod
    def _default_unknown_mode(cls, value: Any) -> DiffMode:
        if value is None:
            return DiffMode.BRANCH
        return DiffMode.coerce(value)


class FileContents(BaseModel):
    """One side of a file diff, as shown by the review UI."""

    name: str
    contents: str
