"""Models for the application."""

from .git_models import (
    ComparisonRequest,
    DiffMode,
    FileChange,
    FileContents,
    FileStatus,
)

__all__ = [
    "ComparisonRequest",
    "DiffMode",
    "FileChange",
    "FileContents",
    "FileStatus",
]
